"""GraphQL query endpoints backed by the query executor."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from ...errors import RequestError
from ...graphql.parsing import parse_query
from ...graphql.schema import export_sdl
from ...logging import get_logger
from ...resolution.executor import QueryExecutor, format_request_error

logger = get_logger(__name__)


router = APIRouter()


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(None, alias="operationName")


@router.post("/graphql")
async def execute_query(body: GraphQLRequest, request: Request) -> JSONResponse:
    """Execute a GraphQL query document.

    Field-level errors come back with HTTP 200 next to the partial data;
    malformed requests are rejected with HTTP 400 and no data.
    """
    executor: QueryExecutor = request.app.state.executor

    try:
        fields = parse_query(body.query, body.variables, body.operation_name)
        result = await executor.execute(fields)
    except RequestError as e:
        logger.info("Query rejected", code=e.code, error=str(e))
        return JSONResponse(
            status_code=400, content={"data": None, "errors": [format_request_error(e)]}
        )

    return JSONResponse(content=result.to_dict())


@router.get("/graphql/schema", response_class=PlainTextResponse)
async def get_schema() -> str:
    """Return the schema as SDL."""
    return export_sdl()
