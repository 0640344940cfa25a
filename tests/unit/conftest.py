"""Shared fixtures for unit tests.

Provides in-memory stores implementing the storage protocols so the
review services can be tested without a database. Every store method
yields to the event loop once before touching state, which lets tests
interleave concurrent service calls deterministically.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence

import pytest

from assigner.database.models import PRStatus, PullRequest, Review, Team, User, utcnow
from assigner.errors import (
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PRExistsError,
    TeamExistsError,
)
from assigner.review.lifecycle import PullRequestService
from assigner.review.ports import AssignmentStats, MemberSpec
from assigner.review.selector import CandidateSelector
from assigner.review.teams import TeamService, UserService


class FakeDatabase:
    """Entity tables shared by the fake stores."""

    def __init__(self) -> None:
        self.teams: dict[str, Team] = {}
        self.users: dict[str, User] = {}
        self.pull_requests: dict[str, PullRequest] = {}
        self._next_team_id = 1

    def add_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        team = Team(id=self._next_team_id, team_name=team_name, created_at=utcnow())
        self._next_team_id += 1
        self.teams[team_name] = team
        for member in members:
            self.users[member.user_id] = User(
                user_id=member.user_id,
                username=member.username,
                team_id=team.id,
                is_active=member.is_active,
                updated_at=utcnow(),
            )
        return team

    def members_of(self, team_id: int) -> list[User]:
        return sorted(
            (u for u in self.users.values() if u.team_id == team_id),
            key=lambda u: u.user_id,
        )

    def team_by_id(self, team_id: int) -> Team | None:
        return next((t for t in self.teams.values() if t.id == team_id), None)


class FakeUserStore:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def get_user(self, user_id: str) -> User:
        await asyncio.sleep(0)
        if user_id not in self.db.users:
            raise NotFoundError()
        return self.db.users[user_id]

    async def list_active_teammates(self, team_id: int, exclude_user_id: str) -> list[User]:
        await asyncio.sleep(0)
        return [
            u
            for u in self.db.members_of(team_id)
            if u.is_active and u.user_id != exclude_user_id
        ]

    async def set_active(self, user_id: str, is_active: bool) -> User:
        await asyncio.sleep(0)
        if user_id not in self.db.users:
            raise NotFoundError()
        user = self.db.users[user_id]
        user.is_active = is_active
        user.updated_at = utcnow()
        return user


class FakeTeamStore:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def create_team(self, team_name: str, members: Sequence[MemberSpec]) -> Team:
        await asyncio.sleep(0)
        if team_name in self.db.teams:
            raise TeamExistsError()
        team = self.db.add_team(team_name, members)
        team.members = self.db.members_of(team.id)
        return team

    async def get_team_by_name(self, team_name: str) -> Team:
        await asyncio.sleep(0)
        if team_name not in self.db.teams:
            raise NotFoundError()
        team = self.db.teams[team_name]
        team.members = self.db.members_of(team.id)
        return team

    async def get_team_by_id(self, team_id: int) -> Team:
        await asyncio.sleep(0)
        team = self.db.team_by_id(team_id)
        if team is None:
            raise NotFoundError()
        return team


class FakePullRequestStore:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.merge_calls = 0

    async def create(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
        reviewer_ids: Sequence[str],
    ) -> PullRequest:
        await asyncio.sleep(0)
        if pull_request_id in self.db.pull_requests:
            raise PRExistsError()
        pr = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
            status=PRStatus.OPEN,
            created_at=utcnow(),
            reviews=[Review(reviewer_id=rid, assigned_at=utcnow()) for rid in reviewer_ids],
        )
        self.db.pull_requests[pull_request_id] = pr
        return pr

    async def get_pull_request(self, pull_request_id: str) -> PullRequest:
        await asyncio.sleep(0)
        if pull_request_id not in self.db.pull_requests:
            raise NotFoundError()
        return self.db.pull_requests[pull_request_id]

    async def mark_merged(self, pull_request_id: str) -> PullRequest:
        await asyncio.sleep(0)
        self.merge_calls += 1
        if pull_request_id not in self.db.pull_requests:
            raise NotFoundError()
        pr = self.db.pull_requests[pull_request_id]
        pr.status = PRStatus.MERGED
        if pr.merged_at is None:
            pr.merged_at = utcnow()
        return pr

    async def replace_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
        new_reviewer_id: str,
    ) -> None:
        await asyncio.sleep(0)
        pr = self.db.pull_requests[pull_request_id]
        review = next((r for r in pr.reviews if r.reviewer_id == old_reviewer_id), None)
        if review is None:
            raise NotAssignedError()
        if new_reviewer_id in pr.assigned_reviewers:
            raise NoCandidateError()
        review.reviewer_id = new_reviewer_id
        review.assigned_at = utcnow()

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequest]:
        await asyncio.sleep(0)
        return [
            pr for pr in self.db.pull_requests.values() if reviewer_id in pr.assigned_reviewers
        ]

    async def assignment_stats(self) -> AssignmentStats:
        await asyncio.sleep(0)
        by_user: dict[str, int] = {}
        by_pr: dict[str, int] = {}
        for pr in self.db.pull_requests.values():
            for reviewer_id in pr.assigned_reviewers:
                by_user[reviewer_id] = by_user.get(reviewer_id, 0) + 1
                by_pr[pr.pull_request_id] = by_pr.get(pr.pull_request_id, 0) + 1
        return AssignmentStats(by_user=by_user, by_pull_request=by_pr)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def user_store(fake_db: FakeDatabase) -> FakeUserStore:
    return FakeUserStore(fake_db)


@pytest.fixture
def team_store(fake_db: FakeDatabase) -> FakeTeamStore:
    return FakeTeamStore(fake_db)


@pytest.fixture
def pr_store(fake_db: FakeDatabase) -> FakePullRequestStore:
    return FakePullRequestStore(fake_db)


@pytest.fixture
def selector() -> CandidateSelector:
    """Selector with a seeded PRNG for reproducible picks."""
    return CandidateSelector(random.Random(1234))


@pytest.fixture
def pr_service(
    user_store: FakeUserStore,
    pr_store: FakePullRequestStore,
    selector: CandidateSelector,
) -> PullRequestService:
    return PullRequestService(user_store, pr_store, selector)


@pytest.fixture
def team_service(team_store: FakeTeamStore) -> TeamService:
    return TeamService(team_store)


@pytest.fixture
def user_service(
    user_store: FakeUserStore,
    team_store: FakeTeamStore,
    pr_store: FakePullRequestStore,
) -> UserService:
    return UserService(user_store, team_store, pr_store)


@pytest.fixture
def backend_team(fake_db: FakeDatabase) -> Team:
    """Team "backend" with author u1 and active teammates u2, u3, u4."""
    return fake_db.add_team(
        "backend",
        [
            MemberSpec("u1", "Alice"),
            MemberSpec("u2", "Bob"),
            MemberSpec("u3", "Carol"),
            MemberSpec("u4", "Dave"),
        ],
    )
