"""
Tests for the remote search client
"""

import httpx
import pytest

from mediagraph.errors import InvalidArgument, UpstreamUnavailable
from mediagraph.models import Artist, Song
from mediagraph.search.client import SearchClient, SearchKind

SEARCH_URL = "https://search.test/search"


def client_returning(response: httpx.Response) -> SearchClient:
    return SearchClient(SEARCH_URL, transport=httpx.MockTransport(lambda request: response))


class TestArtistSearch:
    @pytest.mark.asyncio
    async def test_maps_artist_records(self, search_client):
        artists = await search_client.search("artist", "John Lennon")

        assert artists == [
            Artist(
                name="John Lennon",
                url="https://music.example.com/artist/john-lennon/136975",
                id="136975",
                genre="Rock",
            ),
            Artist(name="John Lennon & Yoko Ono", url=None, id="1018811", genre=None),
        ]

    @pytest.mark.asyncio
    async def test_sends_query_parameters(self, search_client, search_requests):
        await search_client.search_artists("John Lennon")

        assert len(search_requests) == 1
        request = search_requests[0]
        assert request.method == "GET"
        assert request.url.host == "search.test"
        assert request.url.path == "/search"
        assert dict(request.url.params) == {
            "term": "John Lennon",
            "country": "us",
            "entity": "allArtist",
        }


class TestSongSearch:
    @pytest.mark.asyncio
    async def test_maps_song_records(self, search_client):
        songs = await search_client.search(SearchKind.SONG, "Imagine")

        assert [s.id for s in songs] == ["1440853776", "1440846313"]
        first, second = songs
        assert first == Song(
            name="Imagine",
            artist_name="John Lennon",
            album="Imagine",
            url="https://music.example.com/album/imagine/1440853776",
            id="1440853776",
        )
        assert second.album is None

    @pytest.mark.asyncio
    async def test_uses_song_entity(self, search_client, search_requests):
        await search_client.search_songs("Imagine")

        assert search_requests[0].url.params["entity"] == "song"

    @pytest.mark.asyncio
    async def test_every_call_refetches(self, search_client, search_requests):
        await search_client.search_songs("Imagine")
        await search_client.search_songs("Imagine")

        assert len(search_requests) == 2

    @pytest.mark.asyncio
    async def test_preserves_upstream_order(self, song_records):
        reordered = list(reversed(song_records))
        client = client_returning(httpx.Response(200, json={"results": reordered}))

        songs = await client.search_songs("Imagine")

        assert [s.id for s in songs] == ["1440846313", "1440853776"]

    @pytest.mark.asyncio
    async def test_empty_results(self):
        client = client_returning(httpx.Response(200, json={"resultCount": 0, "results": []}))

        assert await client.search_songs("zzzz") == []


class TestInputValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", ["", "   ", "\t\n"])
    async def test_blank_term_makes_no_request(self, search_client, search_requests, term):
        with pytest.raises(InvalidArgument):
            await search_client.search_artists(term)

        assert search_requests == []

    @pytest.mark.asyncio
    async def test_unknown_kind(self, search_client, search_requests):
        with pytest.raises(InvalidArgument):
            await search_client.search("album", "Imagine")

        assert search_requests == []


class TestUpstreamFailures:
    @pytest.mark.asyncio
    async def test_network_error(self, failing_search_client):
        with pytest.raises(UpstreamUnavailable) as exc_info:
            await failing_search_client.search_songs("Imagine")

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert exc_info.value.code == "UPSTREAM_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        client = client_returning(httpx.Response(503, text="Service Unavailable"))

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await client.search_artists("Imagine Dragons")

        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        client = client_returning(httpx.Response(200, text="<html>not json</html>"))

        with pytest.raises(UpstreamUnavailable, match="not valid JSON"):
            await client.search_artists("Imagine Dragons")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"resultCount": 0}, {"results": "nope"}, ["results"]])
    async def test_missing_results_array(self, payload):
        client = client_returning(httpx.Response(200, json=payload))

        with pytest.raises(UpstreamUnavailable, match="results"):
            await client.search_songs("Imagine")

    @pytest.mark.asyncio
    async def test_malformed_record(self):
        client = client_returning(httpx.Response(200, json={"results": [{"artistName": "x"}]}))

        with pytest.raises(UpstreamUnavailable, match="malformed record"):
            await client.search_songs("Imagine")


class TestConfiguration:
    def test_from_settings(self):
        from mediagraph.config import settings

        client = SearchClient.from_settings()

        assert client.base_url == settings.search_url
        assert client.country == settings.search_country
        assert client.timeout == settings.search_timeout

    @pytest.mark.asyncio
    async def test_custom_country(self, search_handler, search_requests):
        client = SearchClient(
            SEARCH_URL, country="gb", transport=httpx.MockTransport(search_handler)
        )

        await client.search_artists("Blur")

        assert search_requests[0].url.params["country"] == "gb"
