"""
Client for the remote full-text search API.

Issues one GET per search against the configured endpoint and normalizes the
heterogeneous result records into ``Artist`` and ``Song`` entities.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import InvalidArgument, UpstreamUnavailable
from ..logging import get_logger
from ..models import Artist, Song

logger = get_logger(__name__)


class SearchKind(str, Enum):
    """Kinds of search supported by the remote endpoint."""

    ARTIST = "artist"
    SONG = "song"


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def artist_from_record(record: dict[str, Any]) -> Artist:
    """Map an ``allArtist`` result record to an Artist."""
    return Artist(
        name=record["artistName"],
        url=record.get("artistLinkUrl"),
        id=str(record["artistId"]),
        genre=record.get("primaryGenreName"),
    )


def song_from_record(record: dict[str, Any]) -> Song:
    """Map a ``song`` result record to a Song."""
    return Song(
        name=record["trackName"],
        artist_name=record["artistName"],
        album=_optional_str(record.get("collectionName")),
        url=record["trackViewUrl"],
        id=str(record["trackId"]),
    )


# kind -> (entity query parameter, record mapper)
SEARCH_ENTITIES: dict[SearchKind, tuple[str, Callable[[dict[str, Any]], Artist | Song]]] = {
    SearchKind.ARTIST: ("allArtist", artist_from_record),
    SearchKind.SONG: ("song", song_from_record),
}


class SearchClient:
    """Stateless client for the remote search endpoint.

    Every call opens its own HTTP client and re-fetches; nothing is cached
    and nothing is retried. The HTTP request is the only suspension point.
    """

    def __init__(
        self,
        base_url: str,
        country: str = "us",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.country = country
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: httpx.AsyncBaseTransport | None = None) -> "SearchClient":
        """Build a client from the global settings."""
        from ..config import settings

        return cls(
            base_url=settings.search_url,
            country=settings.search_country,
            timeout=settings.search_timeout,
            transport=transport,
        )

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def search(self, kind: SearchKind | str, term: str) -> list[Artist | Song]:
        """Search the remote endpoint.

        Args:
            kind: "artist" or "song"; selects the ``entity`` parameter and record shape
            term: Search term, must not be blank

        Returns:
            Entities in the order returned upstream

        Raises:
            InvalidArgument: If the term is blank or the kind is unknown
            UpstreamUnavailable: If the request fails or the body cannot be parsed
        """
        try:
            kind = SearchKind(kind)
        except ValueError as e:
            raise InvalidArgument(f"Unsupported search kind: {kind!r}", argument="kind") from e

        if not term or not term.strip():
            raise InvalidArgument("Search term must not be empty", argument="term")

        entity, mapper = SEARCH_ENTITIES[kind]
        params = {"term": term, "country": self.country, "entity": entity}

        logger.debug("Searching remote API", kind=kind.value, term=term, url=self.base_url)

        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.warning("Remote search request failed", kind=kind.value, error=str(e))
            raise UpstreamUnavailable(f"Search request failed: {e}", cause=e) from e
        except ValueError as e:
            logger.warning("Remote search returned malformed JSON", kind=kind.value, error=str(e))
            raise UpstreamUnavailable("Search response is not valid JSON", cause=e) from e

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            logger.warning("Remote search response has no results array", kind=kind.value)
            raise UpstreamUnavailable("Search response is missing a 'results' array")

        try:
            entities = [mapper(record) for record in results]
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(
                "Remote search returned an unexpected record", kind=kind.value, error=str(e)
            )
            raise UpstreamUnavailable(
                f"Search response has a malformed record: {e}", cause=e
            ) from e

        logger.info("Remote search completed", kind=kind.value, count=len(entities))
        return entities

    async def search_artists(self, term: str) -> list[Artist]:
        """Search for artists by name."""
        return await self.search(SearchKind.ARTIST, term)  # type: ignore[return-value]

    async def search_songs(self, term: str) -> list[Song]:
        """Search for songs by name."""
        return await self.search(SearchKind.SONG, term)  # type: ignore[return-value]
