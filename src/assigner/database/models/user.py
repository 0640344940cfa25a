"""User model for Assigner.

Users are team members. The active flag together with team membership
decides whether a user may be picked as a reviewer.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assigner.database.models.base import Base, utcnow


class User(Base):
    """A team member.

    Attributes:
        user_id: Caller-supplied, globally unique identifier.
        username: Display name.
        team_id: Foreign key to the owning team.
        is_active: Whether the user can currently be assigned reviews.
        updated_at: Last modification timestamp.
        team: Relationship to the owning Team.
    """

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_team_active", "team_id", "is_active"),)

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    team: Mapped["Team"] = relationship(  # noqa: F821
        "Team",
        back_populates="members",
        lazy="raise",
    )
