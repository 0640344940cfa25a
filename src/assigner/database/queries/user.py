"""User query functions for Assigner.

Provides async functions for reading users, toggling the active flag,
loading the eligible reviewer pool of a team, and upserting team members.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from assigner.database.models.base import utcnow
from assigner.database.models.user import User

if TYPE_CHECKING:
    from assigner.review.ports import MemberSpec

logger = structlog.get_logger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def get_user(
    session: AsyncSession,
    user_id: str,
) -> User | None:
    """Retrieve a user by ID.

    Args:
        session: Active async database session.
        user_id: Identifier of the user to retrieve.

    Returns:
        The User instance if found, None otherwise.
    """
    stmt = (
        select(User)
        .where(User.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_active_teammates(
    session: AsyncSession,
    team_id: int,
    exclude_user_id: str,
) -> list[User]:
    """List active members of a team, leaving out one user.

    Args:
        session: Active async database session.
        team_id: Team whose members to list.
        exclude_user_id: User to leave out (typically the author or the
            reviewer being replaced).

    Returns:
        Active users of the team other than ``exclude_user_id``.
    """
    stmt = (
        select(User)
        .where(
            User.team_id == team_id,
            User.is_active.is_(True),
            User.user_id != exclude_user_id,
        )
        .order_by(User.user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def set_user_active(
    session: AsyncSession,
    user_id: str,
    is_active: bool,
) -> User | None:
    """Set a user's active flag.

    Args:
        session: Active async database session.
        user_id: Identifier of the user to update.
        is_active: New value of the flag.

    Returns:
        The updated User, or None if the user does not exist.
    """
    stmt = (
        update(User)
        .where(User.user_id == user_id)
        .values(is_active=is_active, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    await session.commit()

    if result.rowcount == 0:  # type: ignore[union-attr]
        return None

    logger.info("user_activity_updated", user_id=user_id, is_active=is_active)
    return await get_user(session, user_id)


async def upsert_members(
    session: AsyncSession,
    team_id: int,
    members: Sequence[MemberSpec],
) -> None:
    """Insert team members, updating users that already exist.

    Runs inside the caller's transaction and does not commit. A user id
    listed more than once keeps its last occurrence.

    Args:
        session: Active async database session.
        team_id: Team the members are bound to.
        members: Member descriptions to insert or update.
    """
    if not members:
        return

    now = utcnow()
    rows: dict[str, dict[str, Any]] = {}
    for member in members:
        rows[member.user_id] = {
            "user_id": member.user_id,
            "username": member.username,
            "team_id": team_id,
            "is_active": member.is_active,
            "updated_at": now,
        }

    dialect_name = session.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect_name)
    if insert is None:
        raise NotImplementedError(f"Upsert is not supported on dialect {dialect_name}")

    stmt = insert(User).values(list(rows.values()))
    stmt = stmt.on_conflict_do_update(
        index_elements=[User.user_id],
        set_={
            "username": stmt.excluded.username,
            "team_id": stmt.excluded.team_id,
            "is_active": stmt.excluded.is_active,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await session.execute(stmt)

    logger.debug("team_members_upserted", team_id=team_id, count=len(rows))
