"""
Root GraphQL query definitions
"""

import strawberry

from ..types.library import Author, Book
from ..types.music import Artist, Song


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def artists(self, info: strawberry.Info, name: str) -> list[Artist] | None:
        """Search artists by name."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "artists", name=name)

    @strawberry.field
    async def songs(self, info: strawberry.Info, name: str) -> list[Song] | None:
        """Search songs by name."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "songs", name=name)

    @strawberry.field
    async def books(self, info: strawberry.Info) -> list[Book]:
        """Get all books."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "books")

    @strawberry.field
    async def book(self, info: strawberry.Info, id: strawberry.ID) -> Book | None:
        """Get a book by ID."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "book", id=id)

    @strawberry.field
    async def authors(self, info: strawberry.Info) -> list[Author]:
        """Get all authors."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "authors")

    @strawberry.field
    async def author(self, info: strawberry.Info, id: strawberry.ID) -> Author | None:
        """Get an author by ID."""
        from ..resolvers import resolve_root

        return await resolve_root(info, "author", id=id)
