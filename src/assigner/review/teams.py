"""Team and user lifecycle for Assigner."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from assigner.database.models import PullRequest, Team, User
from assigner.review.ports import (
    MemberSpec,
    PullRequestReader,
    TeamReader,
    TeamStorage,
    UserStorage,
)

logger = structlog.get_logger(__name__)


class TeamService:
    """Creates and reads teams."""

    def __init__(self, teams: TeamStorage) -> None:
        self._teams = teams
        self.logger = logger.bind(component="TeamService")

    async def create_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        """Create a team and bind the given members to it.

        Existing users listed as members move into the new team and take
        the supplied username and active flag.

        Raises:
            TeamExistsError: If the team name is taken.
        """
        team = await self._teams.create_team(team_name, members)
        self.logger.info("team_added", team_name=team_name, members=len(team.members))
        return team

    async def get_team(self, team_name: str) -> Team:
        return await self._teams.get_team_by_name(team_name)


class UserService:
    """Toggles user activity and reads review workloads."""

    def __init__(
        self,
        users: UserStorage,
        teams: TeamReader,
        pull_requests: PullRequestReader,
    ) -> None:
        self._users = users
        self._teams = teams
        self._pull_requests = pull_requests
        self.logger = logger.bind(component="UserService")

    async def set_active(self, user_id: str, is_active: bool) -> tuple[User, Team]:
        """Set whether a user may be picked as a reviewer.

        Existing assignments are kept when a user is deactivated.

        Returns:
            Tuple of (updated user, the user's team).

        Raises:
            NotFoundError: If the user does not exist.
        """
        user = await self._users.set_active(user_id, is_active)
        team = await self._teams.get_team_by_id(user.team_id)
        self.logger.info("user_activity_set", user_id=user_id, is_active=is_active)
        return user, team

    async def get_user_reviews(self, user_id: str) -> list[PullRequest]:
        """Pull requests the user is currently assigned to review.

        Raises:
            NotFoundError: If the user does not exist.
        """
        await self._users.get_user(user_id)
        return await self._pull_requests.list_by_reviewer(user_id)
