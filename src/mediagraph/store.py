"""
Static relational store for books and authors.

The store is built once from a fixed dataset and never mutated. Indexes are
fully constructed before the instance is returned, so readers never observe
a partial index and no locking is needed.
"""

from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import TypeVar

from .errors import NotFound
from .logging import get_logger
from .models import Author, Book

logger = get_logger(__name__)

T = TypeVar("T", Book, Author)

BOOKS: tuple[Book, ...] = (
    Book(name="Name of the Wind", genre="Fantasy", id="1", author_id="1"),
    Book(name="The Final Empire", genre="Fantasy", id="2", author_id="2"),
    Book(name="The Hero of Ages", genre="Fantasy", id="4", author_id="2"),
    Book(name="The Long Earth", genre="Sci-Fi", id="3", author_id="3"),
    Book(name="The Colour of Magic", genre="Fantasy", id="5", author_id="3"),
    Book(name="The Light Fantastic", genre="Fantasy", id="6", author_id="3"),
)

AUTHORS: tuple[Author, ...] = (
    Author(name="Patrick Rothfuss", age=44, id="1"),
    Author(name="Brandon Sanderson", age=42, id="2"),
    Author(name="Terry Pratchett", age=66, id="3"),
)


def _index(records: tuple[T, ...], kind: str) -> Mapping[str, T]:
    index: dict[str, T] = {}
    for record in records:
        if record.id in index:
            raise ValueError(f"Duplicate {kind} id: {record.id}")
        index[record.id] = record
    return MappingProxyType(index)


class StaticStore:
    """Read-only collections of books and authors with id indexes."""

    def __init__(self, books: Iterable[Book], authors: Iterable[Author]):
        self._books = tuple(books)
        self._authors = tuple(authors)
        self._books_by_id = _index(self._books, "book")
        self._authors_by_id = _index(self._authors, "author")

        dangling = [b.id for b in self._books if b.author_id not in self._authors_by_id]
        if dangling:
            raise ValueError(f"Books reference unknown authors: {', '.join(dangling)}")

    def list_books(self) -> list[Book]:
        """All books in declaration order."""
        return list(self._books)

    def get_book(self, id: str) -> Book:
        """Look up a book by id.

        Raises:
            NotFound: If no book has that id
        """
        book = self._books_by_id.get(id)
        if book is None:
            logger.info("Book not found", book_id=id)
            raise NotFound("Book", id)
        return book

    def list_authors(self) -> list[Author]:
        """All authors in declaration order."""
        return list(self._authors)

    def get_author(self, id: str) -> Author:
        """Look up an author by id.

        Raises:
            NotFound: If no author has that id
        """
        author = self._authors_by_id.get(id)
        if author is None:
            logger.info("Author not found", author_id=id)
            raise NotFound("Author", id)
        return author

    def get_author_by_book(self, book: Book) -> Author:
        """Resolve the author a book refers to."""
        return self.get_author(book.author_id)


@lru_cache(maxsize=1)
def get_store() -> StaticStore:
    """Get the process-wide store built from the reference dataset."""
    return StaticStore(BOOKS, AUTHORS)
