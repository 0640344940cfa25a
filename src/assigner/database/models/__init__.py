"""SQLAlchemy ORM models for Assigner.

This module defines the database schema: teams, users, pull requests
and reviewer assignments.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from assigner.database.models.base import Base, utcnow
from assigner.database.models.pull_request import PRStatus, PullRequest, Review
from assigner.database.models.team import Team
from assigner.database.models.user import User

__all__ = [
    "Base",
    "utcnow",
    "Team",
    "User",
    "PullRequest",
    "PRStatus",
    "Review",
]
