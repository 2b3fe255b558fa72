"""
Structured logging for the query API and CLI.

Events carry the request id and GraphQL operation of the request being
served, taken from context variables set by the HTTP middleware.
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any, TextIO

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("operation", default=None)

# Length of generated request ids
REQUEST_ID_LENGTH = 14


def merge_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding the current request id and operation."""
    _ = logger, method_name

    for key, var in (("request_id", request_id_ctx), ("operation", operation_ctx)):
        value = var.get()
        if value:
            event_dict[key] = value
    return event_dict


def resolve_level(level: str | int | None, debug: bool = False) -> int:
    """Turn a level name such as ``"info"`` (or a numeric level) into a logging level.

    Without an explicit level, ``debug`` selects DEBUG and INFO otherwise.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    if level is None:
        return logging.DEBUG if debug else logging.INFO
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    debug: bool = False,
    level: str | int | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        debug: Render events for a console instead of as JSON lines
        level: Minimum level, e.g. ``settings.log_level``
        stream: Where records are written (default: stdout)
    """
    logging.basicConfig(
        level=resolve_level(level, debug),
        stream=stream or sys.stdout,
        format="%(message)s",
        force=True,
    )

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            merge_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Random urlsafe id for requests that arrive without ``X-Request-ID``."""
    return secrets.token_urlsafe(REQUEST_ID_LENGTH)[:REQUEST_ID_LENGTH]


def set_request_context(request_id: str | None = None, operation: str | None = None) -> None:
    """Bind the request id (generated when None) and operation for this context."""
    request_id_ctx.set(request_id or generate_request_id())
    if operation is not None:
        operation_ctx.set(operation)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    operation_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()
