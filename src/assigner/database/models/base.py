"""SQLAlchemy declarative base for Assigner.

All models in the Assigner database inherit from Base. Timestamps are
written from Python as timezone-aware UTC values so the same rows behave
identically on PostgreSQL and on the SQLite engine used in tests.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base for all Assigner models."""

    pass


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
