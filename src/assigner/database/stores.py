"""SQLAlchemy-backed stores for Assigner.

Each store opens a short-lived session per call from the shared session
factory, delegates to the query functions, and converts storage faults
into domain errors. No entity state is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from assigner.database.models import PullRequest, Team, User
from assigner.database.queries import pull_request as pr_queries
from assigner.database.queries import team as team_queries
from assigner.database.queries import user as user_queries
from assigner.errors import AppError, InternalIssueError, NotFoundError
from assigner.review.ports import AssignmentStats, MemberSpec

logger = structlog.get_logger(__name__)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Convert unexpected storage errors into InternalIssueError."""
    try:
        yield
    except AppError:
        raise
    except SQLAlchemyError as e:
        logger.error("storage_error", operation=operation, error=str(e))
        raise InternalIssueError() from e


class _SessionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory


class UserStore(_SessionStore):
    """UserReader and UserWriter over the users table."""

    async def get_user(self, user_id: str) -> User:
        with _translate_errors("get_user"):
            async with self._session_factory() as session:
                user = await user_queries.get_user(session, user_id)
        if user is None:
            raise NotFoundError()
        return user

    async def list_active_teammates(self, team_id: int, exclude_user_id: str) -> list[User]:
        with _translate_errors("list_active_teammates"):
            async with self._session_factory() as session:
                return await user_queries.list_active_teammates(
                    session, team_id, exclude_user_id
                )

    async def set_active(self, user_id: str, is_active: bool) -> User:
        with _translate_errors("set_active"):
            async with self._session_factory() as session:
                user = await user_queries.set_user_active(session, user_id, is_active)
        if user is None:
            raise NotFoundError()
        return user


class TeamStore(_SessionStore):
    """TeamReader and TeamWriter over the teams and users tables."""

    async def create_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        with _translate_errors("create_team"):
            async with self._session_factory() as session:
                return await team_queries.create_team(session, team_name, members)

    async def get_team_by_name(self, team_name: str) -> Team:
        with _translate_errors("get_team_by_name"):
            async with self._session_factory() as session:
                team = await team_queries.get_team_by_name(session, team_name)
        if team is None:
            raise NotFoundError()
        return team

    async def get_team_by_id(self, team_id: int) -> Team:
        with _translate_errors("get_team_by_id"):
            async with self._session_factory() as session:
                team = await team_queries.get_team_by_id(session, team_id)
        if team is None:
            raise NotFoundError()
        return team


class PullRequestStore(_SessionStore):
    """PullRequestReader and PullRequestWriter over pull_requests and reviews."""

    async def create(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
        reviewer_ids: Sequence[str],
    ) -> PullRequest:
        with _translate_errors("create_pull_request"):
            async with self._session_factory() as session:
                return await pr_queries.create_pull_request(
                    session, pull_request_id, pull_request_name, author_id, reviewer_ids
                )

    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        with _translate_errors("get_pull_request"):
            async with self._session_factory() as session:
                pr = await pr_queries.get_pull_request(session, pull_request_id)
        if pr is None:
            raise NotFoundError()
        return pr

    async def mark_merged(self, pull_request_id: str) -> PullRequest:
        with _translate_errors("mark_merged"):
            async with self._session_factory() as session:
                pr = await pr_queries.mark_merged(session, pull_request_id)
        if pr is None:
            raise NotFoundError()
        return pr

    async def replace_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
        new_reviewer_id: str,
    ) -> None:
        with _translate_errors("replace_reviewer"):
            async with self._session_factory() as session:
                await pr_queries.replace_reviewer(
                    session, pull_request_id, old_reviewer_id, new_reviewer_id
                )

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequest]:
        with _translate_errors("list_by_reviewer"):
            async with self._session_factory() as session:
                return await pr_queries.list_pull_requests_by_reviewer(session, reviewer_id)

    async def assignment_stats(self) -> AssignmentStats:
        with _translate_errors("assignment_stats"):
            async with self._session_factory() as session:
                by_user, by_pr = await pr_queries.count_assignments(session)
        return AssignmentStats(by_user=by_user, by_pull_request=by_pr)
