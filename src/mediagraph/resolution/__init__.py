"""Resolution layer: field trees, the resolver registry and the executor."""

from ..search.client import SearchClient
from ..store import StaticStore, get_store
from .executor import ExecutionResult, FieldError, QueryExecutor
from .registry import (
    ROOT_TYPE,
    ArgumentKind,
    ArgumentSpec,
    FieldDefinition,
    FieldResolverRegistry,
    ResolverContext,
    build_registry,
)
from .request import FieldRequest, field_tree


def build_executor(
    search: SearchClient | None = None, store: StaticStore | None = None
) -> QueryExecutor:
    """Build an executor wired to the default store and a settings-based search client."""
    context = ResolverContext(
        store=store or get_store(),
        search=search or SearchClient.from_settings(),
    )
    return QueryExecutor(build_registry(), context)


__all__ = [
    "ROOT_TYPE",
    "ArgumentKind",
    "ArgumentSpec",
    "ExecutionResult",
    "FieldDefinition",
    "FieldError",
    "FieldRequest",
    "FieldResolverRegistry",
    "QueryExecutor",
    "ResolverContext",
    "build_executor",
    "build_registry",
    "field_tree",
]
