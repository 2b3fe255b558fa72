"""
Bind the strawberry schema to the field resolver registry.

Strawberry fields delegate to the registry entries, so the declarative
schema and the query executor share one dispatch table.
"""

from __future__ import annotations

from typing import Any

import strawberry

from ..models import Artist, Author, Book, Entity, Song
from ..resolution.executor import QueryExecutor
from ..resolution.registry import ROOT_TYPE


def _graphql_types() -> dict[type[Entity], Any]:
    from .types.library import Author as AuthorType
    from .types.library import Book as BookType
    from .types.music import Artist as ArtistType
    from .types.music import Song as SongType

    return {Artist: ArtistType, Song: SongType, Book: BookType, Author: AuthorType}


def to_graphql(value: Any) -> Any:
    """Convert entities (or lists of them) into their strawberry types."""
    if isinstance(value, (list, tuple)):
        return [to_graphql(item) for item in value]
    if isinstance(value, Entity):
        return _graphql_types()[type(value)].from_model(value)
    return value


def get_executor(info: strawberry.Info) -> QueryExecutor:
    return info.context["executor"]


async def resolve_root(info: strawberry.Info, field_name: str, **arguments: Any) -> Any:
    """Run a root registry entry with strawberry-supplied arguments."""
    executor = get_executor(info)
    definition = executor.registry.get(ROOT_TYPE, field_name)
    if definition is None:
        raise ValueError(f"No resolver registered for {ROOT_TYPE}.{field_name}")

    bound = definition.bind_arguments(ROOT_TYPE, field_name, arguments)
    value = await definition.resolver(None, bound, executor.context)
    return to_graphql(value)


async def resolve_nested(
    info: strawberry.Info, type_name: str, field_name: str, parent: Entity
) -> Any:
    """Resolve a nested field of ``parent`` through the registry."""
    executor = get_executor(info)
    value = await executor.registry.resolve(type_name, field_name, parent, {}, executor.context)
    return to_graphql(value)
