"""
Field resolver registry.

Maps ``(type name, field name)`` to a ``FieldDefinition``. Fields with no
entry are projected from the same-named attribute of the parent entity, so
scalar fields never need an explicit resolver.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import InvalidArgument, UnknownField
from ..logging import get_logger
from ..models import Artist, Author, Book, Entity, Song

if TYPE_CHECKING:
    from ..search.client import SearchClient
    from ..store import StaticStore

logger = get_logger(__name__)

ROOT_TYPE = "Query"


@dataclass(frozen=True)
class ResolverContext:
    """Shared, read-only collaborators handed to every resolver."""

    store: StaticStore
    search: SearchClient


Args = Mapping[str, Any]
Resolver = Callable[[Any, Args, ResolverContext], Awaitable[Any]]


class ArgumentKind(str, Enum):
    """GraphQL input type of an argument."""

    STRING = "String"
    ID = "ID"


@dataclass(frozen=True)
class ArgumentSpec:
    """Contract for a single field argument.

    Values are non-blank strings. ``ID`` arguments also accept integers, as
    GraphQL ``ID`` input does, and normalize them to their string form.
    """

    name: str
    required: bool = True
    kind: ArgumentKind = ArgumentKind.STRING

    def validate(self, field_path: str, value: Any) -> str:
        if self.kind is ArgumentKind.ID and isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise InvalidArgument(
                f"Argument '{self.name}' on {field_path} must be of type {self.kind.value}",
                argument=self.name,
            )
        if not value.strip():
            raise InvalidArgument(
                f"Argument '{self.name}' on {field_path} must not be empty", argument=self.name
            )
        return value


@dataclass(frozen=True)
class FieldDefinition:
    """An explicit resolver entry.

    ``type_name`` is the object type the resolver produces (or a sequence of),
    or None when the field resolves to a scalar.
    """

    resolver: Resolver
    type_name: str | None = None
    arguments: tuple[ArgumentSpec, ...] = ()

    def bind_arguments(
        self, parent_type: str, field_name: str, arguments: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Check supplied arguments against the declared contracts.

        Raises:
            InvalidArgument: On unknown, missing or malformed arguments
        """
        field_path = f"{parent_type}.{field_name}"
        declared = {spec.name: spec for spec in self.arguments}

        unexpected = sorted(set(arguments) - set(declared))
        if unexpected:
            raise InvalidArgument(
                f"Unknown argument '{unexpected[0]}' on {field_path}", argument=unexpected[0]
            )

        bound: dict[str, Any] = {}
        for spec in self.arguments:
            value = arguments.get(spec.name)
            if value is None:
                if spec.required:
                    raise InvalidArgument(
                        f"Missing required argument '{spec.name}' on {field_path}",
                        argument=spec.name,
                    )
                continue
            bound[spec.name] = spec.validate(field_path, value)
        return bound


@dataclass
class FieldResolverRegistry:
    """Dispatch table from ``(type, field)`` to resolvers, plus the entity
    class behind each object type for the scalar fallback."""

    fields: dict[tuple[str, str], FieldDefinition] = field(default_factory=dict)
    types: dict[str, type[Entity]] = field(default_factory=dict)

    def register_type(self, type_name: str, model: type[Entity]) -> None:
        self.types[type_name] = model

    def register(
        self,
        type_name: str,
        field_name: str,
        resolver: Resolver,
        returns: str | None = None,
        arguments: tuple[ArgumentSpec, ...] = (),
    ) -> None:
        if (type_name, field_name) in self.fields:
            raise ValueError(f"Resolver already registered for {type_name}.{field_name}")
        self.fields[(type_name, field_name)] = FieldDefinition(
            resolver=resolver, type_name=returns, arguments=arguments
        )

    def get(self, type_name: str, field_name: str) -> FieldDefinition | None:
        return self.fields.get((type_name, field_name))

    def root_fields(self) -> list[str]:
        return [name for (type_name, name) in self.fields if type_name == ROOT_TYPE]

    def scalar_attribute(self, type_name: str, field_name: str) -> str | None:
        """Map a requested field name to the entity attribute backing it.

        Both the public (camelCase) name and the attribute name are accepted.
        """
        model = self.types.get(type_name)
        if model is None:
            return None
        for attribute, info in model.model_fields.items():
            if field_name == attribute or field_name == info.alias:
                return attribute
        return None

    def lookup(self, type_name: str, field_name: str) -> FieldDefinition | str:
        """Find the explicit entry or the fallback attribute for a field.

        Raises:
            UnknownField: If neither exists
        """
        definition = self.get(type_name, field_name)
        if definition is not None:
            return definition
        if type_name != ROOT_TYPE:
            attribute = self.scalar_attribute(type_name, field_name)
            if attribute is not None:
                return attribute
        raise UnknownField(type_name, field_name)

    async def resolve(
        self,
        type_name: str,
        field_name: str,
        parent: Any,
        arguments: Mapping[str, Any],
        context: ResolverContext,
    ) -> Any:
        """Resolve one field of ``parent`` (None for root fields)."""
        target = self.lookup(type_name, field_name)
        if isinstance(target, FieldDefinition):
            return await target.resolver(parent, arguments, context)
        return project_attribute(type_name, field_name, parent, target)


def project_attribute(type_name: str, field_name: str, parent: Any, attribute: str) -> Any:
    """Read a scalar attribute off the parent entity."""
    try:
        return getattr(parent, attribute)
    except AttributeError as e:
        raise UnknownField(type_name, field_name) from e


# Root resolvers


async def resolve_artists(parent: None, args: Args, context: ResolverContext) -> list[Artist]:
    return await context.search.search_artists(args["name"])


async def resolve_songs(parent: None, args: Args, context: ResolverContext) -> list[Song]:
    return await context.search.search_songs(args["name"])


async def resolve_books(parent: None, args: Args, context: ResolverContext) -> list[Book]:
    return context.store.list_books()


async def resolve_book(parent: None, args: Args, context: ResolverContext) -> Book:
    return context.store.get_book(args["id"])


async def resolve_authors(parent: None, args: Args, context: ResolverContext) -> list[Author]:
    return context.store.list_authors()


async def resolve_author(parent: None, args: Args, context: ResolverContext) -> Author:
    return context.store.get_author(args["id"])


# Nested resolvers


async def resolve_book_author(parent: Book, args: Args, context: ResolverContext) -> Author:
    return context.store.get_author_by_book(parent)


def build_registry() -> FieldResolverRegistry:
    """Build the registry for the Artist/Song/Book/Author schema."""
    registry = FieldResolverRegistry()

    registry.register_type("Artist", Artist)
    registry.register_type("Song", Song)
    registry.register_type("Book", Book)
    registry.register_type("Author", Author)

    name_arg = (ArgumentSpec("name"),)
    id_arg = (ArgumentSpec("id", kind=ArgumentKind.ID),)

    registry.register(ROOT_TYPE, "artists", resolve_artists, returns="Artist", arguments=name_arg)
    registry.register(ROOT_TYPE, "songs", resolve_songs, returns="Song", arguments=name_arg)
    registry.register(ROOT_TYPE, "books", resolve_books, returns="Book")
    registry.register(ROOT_TYPE, "book", resolve_book, returns="Book", arguments=id_arg)
    registry.register(ROOT_TYPE, "authors", resolve_authors, returns="Author")
    registry.register(ROOT_TYPE, "author", resolve_author, returns="Author", arguments=id_arg)

    registry.register("Book", "author", resolve_book_author, returns="Author")

    logger.debug("Field resolver registry built", fields=len(registry.fields))
    return registry
