"""
Entity definitions for the mediagraph resolution layer.

These Pydantic models are the typed entities the resolvers produce. Attributes
are snake_case in Python and exposed under camelCase aliases in query results.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Entity(BaseModel):
    """Common configuration for all resolvable entities."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Artist(Entity):
    """An artist returned by the remote search API."""

    name: str = Field(description="Artist name")
    url: str | None = Field(None, description="Link to the artist page")
    id: str = Field(description="Upstream artist identifier")
    genre: str | None = Field(None, description="Primary genre")


class Song(Entity):
    """A song returned by the remote search API."""

    name: str = Field(description="Track name")
    artist_name: str = Field(description="Performing artist")
    album: str | None = Field(None, description="Album (collection) name")
    url: str = Field(description="Link to the track page")
    id: str = Field(description="Upstream track identifier")


class Book(Entity):
    """A book in the static store."""

    name: str
    genre: str
    id: str
    author_id: str = Field(description="Foreign key into the author collection")


class Author(Entity):
    """An author in the static store."""

    name: str
    age: int
    id: str
