"""Initial schema for Assigner.

Creates the teams, users, pull_requests and reviews tables together with
the pr_status enum.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    pr_status = postgresql.ENUM("OPEN", "MERGED", name="pr_status", create_type=False)
    pr_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("team_name", sa.Text(), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.Text(), primary_key=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    # Reviewer pool lookups filter by team and active flag
    op.create_index("ix_users_team_active", "users", ["team_id", "is_active"])

    op.create_table(
        "pull_requests",
        sa.Column("pull_request_id", sa.Text(), primary_key=True),
        sa.Column("pull_request_name", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Text(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status", pr_status, nullable=False, server_default="OPEN"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_pull_requests_author_id", "pull_requests", ["author_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "pull_request_id",
            sa.Text(),
            sa.ForeignKey("pull_requests.pull_request_id"),
            nullable=False,
        ),
        sa.Column("reviewer_id", sa.Text(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("pull_request_id", "reviewer_id", name="uq_reviews_pr_reviewer"),
    )
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])


def downgrade() -> None:
    op.drop_index("ix_reviews_reviewer_id", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("ix_pull_requests_author_id", table_name="pull_requests")
    op.drop_table("pull_requests")
    op.drop_index("ix_users_team_active", table_name="users")
    op.drop_table("users")
    op.drop_table("teams")

    sa.Enum(name="pr_status").drop(op.get_bind(), checkfirst=True)
