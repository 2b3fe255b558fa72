"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from graphql import validate_schema as gql_validate_schema

from ..logging import get_logger
from ..resolution import build_registry
from ..resolution.executor import QueryExecutor
from .queries.root import Query

logger = get_logger(__name__)

schema = strawberry.Schema(query=Query)


def validate_schema() -> None:
    """Check the schema at startup.

    The declared root fields must be exactly the registry's root entries.

    Raises:
        RuntimeError: If graphql-core rejects the schema or the root fields differ
    """
    errors = gql_validate_schema(schema._schema)
    if errors:
        raise RuntimeError(f"Invalid GraphQL schema: {'; '.join(str(e) for e in errors)}")

    declared = set(schema._schema.query_type.fields)
    registered = set(build_registry().root_fields())
    if declared != registered:
        logger.error(
            "Schema root fields do not match the resolver registry",
            missing_resolvers=sorted(declared - registered),
            undeclared=sorted(registered - declared),
        )
        raise RuntimeError("Schema root fields do not match the resolver registry")

    logger.info("GraphQL schema validated", root_fields=sorted(declared))


def export_sdl() -> str:
    """Render the schema as SDL."""
    return schema.as_str()


def get_context(executor: QueryExecutor) -> dict[str, Any]:
    """Build the context strawberry resolvers expect."""
    return {"executor": executor}
