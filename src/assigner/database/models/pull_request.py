"""Pull request and review assignment models for Assigner.

Defines the PullRequest table, the PRStatus enum and the Review table
binding one reviewer to one pull request.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assigner.database.models.base import Base, utcnow


class PRStatus(str, enum.Enum):
    """Lifecycle status for a pull request.

    States:
        OPEN: Initial state, reviewers may be reassigned.
        MERGED: Terminal state.
    """

    OPEN = "OPEN"
    MERGED = "MERGED"


class PullRequest(Base):
    """A pull request awaiting (or past) review.

    Attributes:
        pull_request_id: Caller-supplied, globally unique identifier.
        pull_request_name: Display name.
        author_id: Foreign key to the authoring user.
        status: OPEN or MERGED.
        created_at: Creation timestamp.
        merged_at: Set once, on the first merge.
        reviews: Review rows for the currently assigned reviewers.
    """

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(Text, primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )
    status: Mapped[PRStatus] = mapped_column(
        Enum(PRStatus, name="pr_status"),
        nullable=False,
        default=PRStatus.OPEN,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="pull_request",
        lazy="selectin",
        order_by="Review.id",
        cascade="all, delete-orphan",
    )

    @property
    def assigned_reviewers(self) -> list[str]:
        """Identifiers of the reviewers currently assigned."""
        return [review.reviewer_id for review in self.reviews]


class Review(Base):
    """Assignment of one reviewer to one pull request.

    Attributes:
        id: Surrogate integer key.
        pull_request_id: Foreign key to the pull request.
        reviewer_id: Foreign key to the assigned user.
        assigned_at: When this reviewer was (re)assigned.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("pull_request_id", "reviewer_id", name="uq_reviews_pr_reviewer"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pull_request_id: Mapped[str] = mapped_column(
        ForeignKey("pull_requests.pull_request_id"),
        nullable=False,
    )
    reviewer_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    pull_request: Mapped[PullRequest] = relationship(
        "PullRequest",
        back_populates="reviews",
        lazy="raise",
    )
