"""Team query functions for Assigner.

Provides async functions for creating a team together with its members
and reading teams by name or internal id.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from assigner.database.models.team import Team
from assigner.database.queries.user import upsert_members
from assigner.errors import TeamExistsError

if TYPE_CHECKING:
    from assigner.review.ports import MemberSpec

logger = structlog.get_logger(__name__)


async def create_team(
    session: AsyncSession,
    team_name: str,
    members: Sequence[MemberSpec],
) -> Team:
    """Create a team and bind its members in a single transaction.

    Members that already exist elsewhere are moved into the new team and
    take the supplied username and active flag.

    Args:
        session: Active async database session.
        team_name: Unique team name.
        members: Members to insert or update.

    Returns:
        The newly created Team with its members loaded.

    Raises:
        TeamExistsError: If a team with this name already exists.
    """
    team = Team(team_name=team_name)
    session.add(team)

    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        raise TeamExistsError() from e

    await upsert_members(session, team.id, members)
    await session.commit()
    await session.refresh(team, ["members"])

    logger.info(
        "team_created",
        team_name=team_name,
        team_id=team.id,
        member_count=len(team.members),
    )

    return team


async def get_team_by_name(
    session: AsyncSession,
    team_name: str,
) -> Team | None:
    """Retrieve a team and its members by name.

    Args:
        session: Active async database session.
        team_name: Name of the team to retrieve.

    Returns:
        The Team instance if found, None otherwise.
    """
    stmt = (
        select(Team)
        .where(Team.team_name == team_name)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_team_by_id(
    session: AsyncSession,
    team_id: int,
) -> Team | None:
    """Retrieve a team and its members by internal id."""
    stmt = (
        select(Team)
        .where(Team.id == team_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
