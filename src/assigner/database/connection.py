"""Database connection management for Assigner.

This module provides factory functions for creating SQLAlchemy async engines
and session factories, configured from the application's DatabaseConfig.

The connection manager uses asyncpg as the PostgreSQL driver; ``sslmode``
is handed to asyncpg only, so an explicit ``url`` for another driver gets
no ``ssl`` argument.

Pool bounds map onto SQLAlchemy's queue pool: ``min_connections``
connections are kept open, up to ``max_connections - min_connections``
overflow connections are opened under load and closed again when returned,
and connections older than ``max_conn_lifetime_seconds`` are recycled on
checkout.

Example usage:
    >>> from assigner.config import DatabaseConfig
    >>> from assigner.database.connection import get_engine, get_session_factory
    >>>
    >>> engine = get_engine(DatabaseConfig(host="db.internal"))
    >>> SessionFactory = get_session_factory(engine)
    >>>
    >>> async with SessionFactory() as session:
    ...     result = await session.execute(select(Team))
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from assigner.config import DatabaseConfig


def get_connect_args(config: DatabaseConfig) -> dict[str, Any]:
    """Driver keyword arguments for the configured DSN."""
    if make_url(config.dsn).get_driver_name() == "asyncpg":
        return {"ssl": config.sslmode}
    return {}


def get_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from database configuration.

    Args:
        config: Database configuration containing connection parts, pool
                bounds, and SQL echo preference.

    Returns:
        Configured AsyncEngine instance with connection pooling.
    """
    return create_async_engine(
        config.dsn,
        pool_size=config.min_connections,
        max_overflow=config.max_connections - config.min_connections,
        pool_recycle=config.max_conn_lifetime_seconds,
        pool_timeout=config.pool_timeout_seconds,
        pool_pre_ping=config.pool_pre_ping,
        echo=config.echo,
        connect_args=get_connect_args(config),
    )


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine.

    The returned factory produces AsyncSession instances configured with
    expire_on_commit=False so committed rows can be read after the session
    closes without triggering lazy loads.

    Args:
        engine: AsyncEngine to bind sessions to.

    Returns:
        Configured async_sessionmaker that produces AsyncSession instances.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
