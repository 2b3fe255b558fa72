"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

# Keep settings deterministic regardless of the developer's environment
os.environ.setdefault("MEDIAGRAPH_DEBUG", "false")
os.environ.setdefault("MEDIAGRAPH_SEARCH_URL", "https://search.test/search")
os.environ.setdefault("MEDIAGRAPH_LOG_LEVEL", "info")

from mediagraph.resolution import QueryExecutor, ResolverContext, build_registry  # noqa: E402
from mediagraph.search.client import SearchClient  # noqa: E402
from mediagraph.store import get_store  # noqa: E402

SEARCH_URL = "https://search.test/search"


@pytest.fixture
def artist_records() -> list[dict[str, Any]]:
    """Raw ``allArtist`` records as returned by the search API."""
    return [
        {
            "wrapperType": "artist",
            "artistType": "Artist",
            "artistName": "John Lennon",
            "artistLinkUrl": "https://music.example.com/artist/john-lennon/136975",
            "artistId": 136975,
            "primaryGenreName": "Rock",
            "primaryGenreId": 21,
        },
        {
            "wrapperType": "artist",
            "artistType": "Artist",
            "artistName": "John Lennon & Yoko Ono",
            "artistId": 1018811,
        },
    ]


@pytest.fixture
def song_records() -> list[dict[str, Any]]:
    """Raw ``song`` records as returned by the search API."""
    return [
        {
            "wrapperType": "track",
            "kind": "song",
            "artistId": 136975,
            "trackId": 1440853776,
            "artistName": "John Lennon",
            "collectionName": "Imagine",
            "trackName": "Imagine",
            "trackViewUrl": "https://music.example.com/album/imagine/1440853776",
        },
        {
            "wrapperType": "track",
            "kind": "song",
            "trackId": 1440846313,
            "artistName": "A Perfect Circle",
            "trackName": "Imagine",
            "trackViewUrl": "https://music.example.com/album/imagine/1440846313",
        },
    ]


@pytest.fixture
def search_requests() -> list[httpx.Request]:
    """Requests received by the mocked search API, in order."""
    return []


@pytest.fixture
def search_handler(
    artist_records, song_records, search_requests
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering artist and song searches with the sample records."""

    def handler(request: httpx.Request) -> httpx.Response:
        search_requests.append(request)
        entity = request.url.params.get("entity")
        results = artist_records if entity == "allArtist" else song_records
        return httpx.Response(200, json={"resultCount": len(results), "results": results})

    return handler


@pytest.fixture
def search_client(search_handler) -> SearchClient:
    """Search client wired to the mocked search API."""
    return SearchClient(SEARCH_URL, transport=httpx.MockTransport(search_handler))


@pytest.fixture
def failing_search_client(search_requests) -> SearchClient:
    """Search client whose every request fails at the network level."""

    def handler(request: httpx.Request) -> httpx.Response:
        search_requests.append(request)
        raise httpx.ConnectError("Connection refused", request=request)

    return SearchClient(SEARCH_URL, transport=httpx.MockTransport(handler))


@pytest.fixture
def store():
    return get_store()


@pytest.fixture
def executor(search_client, store) -> QueryExecutor:
    """Executor backed by the reference store and the mocked search API."""
    return QueryExecutor(build_registry(), ResolverContext(store=store, search=search_client))
