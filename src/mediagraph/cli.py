#!/usr/bin/env python3
"""
Main CLI entry point for the mediagraph server.
"""

import asyncio
import json
import os
import sys

import click
import uvicorn

from mediagraph import __version__
from mediagraph.config import settings
from mediagraph.errors import RequestError
from mediagraph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="mediagraph")
def cli() -> None:
    """mediagraph CLI - serve and inspect the query API."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8090,
    type=int,
    help="Port to bind to (default: 8090)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the mediagraph API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info(
        "Starting mediagraph API server",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )

    # The app reads these when imported by the server process
    if log_level == "debug":
        os.environ["MEDIAGRAPH_DEBUG"] = "true"
        os.environ["MEDIAGRAPH_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("MEDIAGRAPH_DEBUG", "false")
        os.environ.setdefault("MEDIAGRAPH_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "mediagraph.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("export-schema")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the SDL to this file instead of stdout",
)
def export_schema(output: str | None) -> None:
    """Print the GraphQL schema as SDL."""
    from mediagraph.graphql.schema import export_sdl

    sdl = export_sdl()
    if output is None:
        click.echo(sdl)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(sdl + "\n")
    click.echo(f"✓ Schema written to {output}")


@cli.command()
@click.argument("document")
@click.option(
    "--variables",
    default=None,
    help="Query variables as a JSON object",
)
@click.option(
    "--operation-name",
    default=None,
    help="Operation to run when the document holds several",
)
def query(document: str, variables: str | None, operation_name: str | None) -> None:
    """Execute a query DOCUMENT and print the JSON response."""
    from mediagraph.graphql.parsing import parse_query
    from mediagraph.resolution import build_executor
    from mediagraph.resolution.executor import format_request_error

    # stdout carries only the JSON response
    configure_logging(level=settings.log_level, stream=sys.stderr)

    try:
        variable_values = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables") from e

    async def do_query() -> dict:
        fields = parse_query(document, variable_values, operation_name)
        result = await build_executor().execute(fields)
        return result.to_dict()

    try:
        response = asyncio.run(do_query())
    except RequestError as e:
        click.echo(json.dumps({"data": None, "errors": [format_request_error(e)]}, indent=2))
        sys.exit(1)

    click.echo(json.dumps(response, indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
