"""Database layer for Assigner.

This module handles database connections and session management, and
provides the SQLAlchemy async engine configuration for PostgreSQL.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    Base: SQLAlchemy declarative base for all models.
"""

from assigner.database.connection import get_engine, get_session_factory
from assigner.database.models import (
    Base,
    PRStatus,
    PullRequest,
    Review,
    Team,
    User,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "Base",
    "Team",
    "User",
    "PullRequest",
    "PRStatus",
    "Review",
]
