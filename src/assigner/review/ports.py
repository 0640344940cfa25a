"""Storage capability interfaces used by the review services.

Each entity kind exposes a reader and a writer protocol. Services depend
on these protocols only, so the SQLAlchemy stores can be swapped for
in-memory fakes in tests.

Readers raise ``NotFoundError`` for missing entities; every other storage
fault surfaces as ``InternalIssueError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from assigner.database.models import PullRequest, Team, User


@dataclass(frozen=True)
class MemberSpec:
    """A team member as supplied when creating a team."""

    user_id: str
    username: str
    is_active: bool = True


@dataclass(frozen=True)
class AssignmentStats:
    """Review assignment counts.

    Attributes:
        by_user: Number of current assignments per reviewer id.
        by_pull_request: Number of current reviewers per pull request id.
    """

    by_user: dict[str, int]
    by_pull_request: dict[str, int]


class UserReader(Protocol):
    async def get_user(self, user_id: str) -> User: ...

    async def list_active_teammates(self, team_id: int, exclude_user_id: str) -> list[User]:
        """Active members of ``team_id`` other than ``exclude_user_id``."""
        ...


class UserWriter(Protocol):
    async def set_active(self, user_id: str, is_active: bool) -> User: ...


class TeamReader(Protocol):
    async def get_team_by_name(self, team_name: str) -> Team: ...

    async def get_team_by_id(self, team_id: int) -> Team: ...


class TeamWriter(Protocol):
    async def create_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        """Create a team and upsert its members atomically.

        Raises:
            TeamExistsError: If the name is taken.
        """
        ...


class PullRequestReader(Protocol):
    async def get_pull_request(self, pull_request_id: str) -> PullRequest: ...

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequest]: ...

    async def assignment_stats(self) -> AssignmentStats: ...


class PullRequestWriter(Protocol):
    async def create(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
        reviewer_ids: Sequence[str],
    ) -> PullRequest:
        """Persist an OPEN pull request with its reviewers atomically.

        Raises:
            PRExistsError: If the id is taken.
        """
        ...

    async def mark_merged(self, pull_request_id: str) -> PullRequest: ...

    async def replace_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
        new_reviewer_id: str,
    ) -> None:
        """Swap the single ``(pull_request_id, old_reviewer_id)`` assignment.

        Raises:
            NotAssignedError: If that assignment no longer exists.
        """
        ...


class UserStorage(UserReader, UserWriter, Protocol):
    pass


class TeamStorage(TeamReader, TeamWriter, Protocol):
    pass


class PullRequestStorage(PullRequestReader, PullRequestWriter, Protocol):
    pass
