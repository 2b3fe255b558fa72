"""
Book and Author GraphQL type definitions
"""

import strawberry

from ...models import Author as AuthorModel
from ...models import Book as BookModel


@strawberry.type
class Author:
    """Author type for GraphQL API."""

    name: str
    age: int
    id: strawberry.ID

    @classmethod
    def from_model(cls, author: AuthorModel) -> "Author":
        return cls(name=author.name, age=author.age, id=strawberry.ID(author.id))


@strawberry.type
class Book:
    """Book type for GraphQL API."""

    name: str
    genre: str
    id: strawberry.ID
    author_id: strawberry.ID

    @classmethod
    def from_model(cls, book: BookModel) -> "Book":
        return cls(
            name=book.name,
            genre=book.genre,
            id=strawberry.ID(book.id),
            author_id=strawberry.ID(book.author_id),
        )

    def to_model(self) -> BookModel:
        return BookModel(name=self.name, genre=self.genre, id=self.id, author_id=self.author_id)

    @strawberry.field
    async def author(self, info: strawberry.Info) -> Author:
        """Get the author of this book."""
        from ..resolvers import resolve_nested

        return await resolve_nested(info, "Book", "author", self.to_model())
