"""
Main FastAPI application for the mediagraph service
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..resolution import QueryExecutor, build_executor

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "Starting mediagraph API...",
        search_url=settings.search_url,
        environment=settings.environment,
    )

    from ..graphql.schema import validate_schema

    # Fail fast: the server should not start with a broken schema
    validate_schema()

    yield

    logger.info("Shutting down mediagraph API...")


def create_app(executor: QueryExecutor | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        executor: Query executor to serve; defaults to one built from settings
    """
    app = FastAPI(
        title="mediagraph API",
        description="Typed queries over music search and a static book catalog",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # The store and registry are built once, before the first request
    app.state.executor = executor or build_executor()
    logger.info(
        "Query executor initialized", root_fields=app.state.executor.registry.root_fields()
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from .endpoints import graphql

    app.include_router(graphql.router, tags=["GraphQL"])

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mediagraph.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
