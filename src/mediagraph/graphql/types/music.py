"""
Artist and Song GraphQL type definitions
"""

import strawberry

from ...models import Artist as ArtistModel
from ...models import Song as SongModel


@strawberry.type
class Artist:
    """Artist type for GraphQL API."""

    name: str
    url: str | None
    id: strawberry.ID
    genre: str | None

    @classmethod
    def from_model(cls, artist: ArtistModel) -> "Artist":
        return cls(
            name=artist.name,
            url=artist.url,
            id=strawberry.ID(artist.id),
            genre=artist.genre,
        )


@strawberry.type
class Song:
    """Song type for GraphQL API."""

    name: str
    artist_name: str
    album: str | None
    url: str
    id: strawberry.ID

    @classmethod
    def from_model(cls, song: SongModel) -> "Song":
        return cls(
            name=song.name,
            artist_name=song.artist_name,
            album=song.album,
            url=song.url,
            id=strawberry.ID(song.id),
        )
