"""Team model for Assigner.

A team is a named group of users. Reviewers for a pull request are
always drawn from the author's team.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assigner.database.models.base import Base, utcnow


class Team(Base):
    """A team of developers.

    Attributes:
        id: Surrogate integer key assigned at creation.
        team_name: Globally unique team name.
        created_at: Creation timestamp.
        members: Users currently belonging to the team.
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    members: Mapped[list["User"]] = relationship(  # noqa: F821
        "User",
        back_populates="team",
        lazy="selectin",
        order_by="User.user_id",
    )
