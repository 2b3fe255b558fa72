"""
Middleware for request context and logging
"""

import json
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .graphql.parsing import operation_label
from .logging import clear_request_context, get_logger, get_request_id, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Operation name of a POST /graphql request, for log context."""
    if request.url.path != GRAPHQL_PATH or request.method != "POST":
        return None

    try:
        body = await request.body()
        if not body:
            return None
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None

    op = data.get("operationName")
    if isinstance(op, str) and op:
        return op
    query = data.get("query")
    if not isinstance(query, str) or not query:
        return None
    return operation_label(query)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and set logging context."""
        operation = await extract_graphql_operation_name(request)
        set_request_context(request_id=request.headers.get("x-request-id"), operation=operation)

        try:
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)
            response.headers["X-Request-ID"] = get_request_id() or ""

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
