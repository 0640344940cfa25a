"""FastAPI application factory for Assigner.

This module provides the application factory that creates and configures
a FastAPI application with:
- Request logging middleware with correlation IDs
- Per-request timeout middleware
- Uniform error responses for domain and validation errors
- Database connection lifecycle management

Example usage:
    >>> from assigner.config import AssignerConfig
    >>> from assigner.web.app import create_app
    >>>
    >>> app = create_app(AssignerConfig())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from assigner import __version__
from assigner.config import AssignerConfig
from assigner.database.connection import get_engine, get_session_factory
from assigner.logging import get_logger
from assigner.review.selector import CandidateSelector
from assigner.web.errors import register_error_handlers
from assigner.web.middleware import RequestLoggingMiddleware, RequestTimeoutMiddleware
from assigner.web.routes.health import create_health_router
from assigner.web.routes.pull_requests import create_pull_requests_router
from assigner.web.routes.stats import create_stats_router
from assigner.web.routes.teams import create_teams_router
from assigner.web.routes.users import create_users_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage the database pool for the lifetime of the application.

    The engine is created on startup and stored in app.state next to its
    session factory. On shutdown, after in-flight requests have drained,
    the pool is disposed.

    Args:
        app: FastAPI application instance

    Yields:
        None after startup, cleans up on context exit
    """
    config: AssignerConfig = app.state.config

    logger.info("app_startup_begin", addr=config.server.addr)

    engine: AsyncEngine = get_engine(config.database)
    session_factory: async_sessionmaker[AsyncSession] = get_session_factory(engine)

    app.state.engine = engine
    app.state.session_factory = session_factory

    logger.info(
        "database_pool_initialized",
        host=config.database.host,
        database=config.database.name,
        max_connections=config.database.max_connections,
        min_connections=config.database.min_connections,
    )

    yield

    logger.info("app_shutdown_begin")
    await engine.dispose()
    logger.info("database_pool_disposed")


def create_app(
    config: AssignerConfig | None = None,
    selector: CandidateSelector | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Args:
        config: Optional AssignerConfig. If None, creates default config.
        selector: Reviewer selector to use. If None, one backed by the
            operating system CSPRNG is created.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = AssignerConfig()

    app = FastAPI(
        title="Assigner",
        version=__version__,
        description="Automatic pull request reviewer assignment",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.selector = selector if selector is not None else CandidateSelector()

    register_error_handlers(app)

    # Timeout sits inside logging so timed-out requests are still logged
    app.add_middleware(
        RequestTimeoutMiddleware,
        timeout_seconds=config.server.request_timeout_seconds,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(create_health_router())
    app.include_router(create_teams_router())
    app.include_router(create_users_router())
    app.include_router(create_pull_requests_router())
    app.include_router(create_stats_router())

    logger.info("app_created", version=__version__)

    return app
