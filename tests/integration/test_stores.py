"""Integration tests for the session-per-call stores.

Stores open a fresh session for every call, so these tests also check
that returned entities stay readable after their session is closed.
"""

from __future__ import annotations

import asyncio
import random
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from assigner.database.models import PRStatus
from assigner.database.stores import PullRequestStore, TeamStore, UserStore
from assigner.errors import (
    InternalIssueError,
    NotAssignedError,
    NotFoundError,
    PRExistsError,
    TeamExistsError,
)
from assigner.review.lifecycle import PullRequestService
from assigner.review.ports import MemberSpec
from assigner.review.selector import CandidateSelector


@pytest.mark.asyncio
async def test_team_round_trip(team_store: TeamStore) -> None:
    created = await team_store.create_team(
        "backend", [MemberSpec("u1", "Alice"), MemberSpec("u2", "Bob")]
    )

    by_name = await team_store.get_team_by_name("backend")
    by_id = await team_store.get_team_by_id(created.id)

    assert by_name.id == created.id
    assert by_id.team_name == "backend"
    assert [m.user_id for m in by_name.members] == ["u1", "u2"]


@pytest.mark.asyncio
async def test_duplicate_team_raises_team_exists(team_store: TeamStore) -> None:
    await team_store.create_team("backend", [MemberSpec("u1", "Alice")])

    with pytest.raises(TeamExistsError):
        await team_store.create_team("backend", [MemberSpec("u2", "Bob")])


@pytest.mark.asyncio
async def test_missing_entities_raise_not_found(
    team_store: TeamStore, user_store: UserStore, pr_store: PullRequestStore
) -> None:
    with pytest.raises(NotFoundError):
        await team_store.get_team_by_name("nope")
    with pytest.raises(NotFoundError):
        await user_store.get_user("ghost")
    with pytest.raises(NotFoundError):
        await user_store.set_active("ghost", False)
    with pytest.raises(NotFoundError):
        await pr_store.get_pull_request("missing")
    with pytest.raises(NotFoundError):
        await pr_store.mark_merged("missing")


@pytest.mark.asyncio
async def test_duplicate_pull_request_raises_pr_exists(
    team_store: TeamStore, pr_store: PullRequestStore
) -> None:
    await team_store.create_team(
        "backend", [MemberSpec("u1", "Alice"), MemberSpec("u2", "Bob")]
    )
    await pr_store.create("pr-1", "First", "u1", ["u2"])

    with pytest.raises(PRExistsError):
        await pr_store.create("pr-1", "Second", "u2", [])

    pr = await pr_store.get_pull_request("pr-1")
    assert pr.pull_request_name == "First"
    assert pr.assigned_reviewers == ["u2"]


@pytest.mark.asyncio
async def test_merge_and_workload(team_store: TeamStore, pr_store: PullRequestStore) -> None:
    await team_store.create_team(
        "backend",
        [MemberSpec("u1", "Alice"), MemberSpec("u2", "Bob"), MemberSpec("u3", "Carol")],
    )
    await pr_store.create("pr-1", "One", "u1", ["u2", "u3"])
    await pr_store.create("pr-2", "Two", "u3", ["u2"])

    merged = await pr_store.mark_merged("pr-1")
    again = await pr_store.mark_merged("pr-1")

    assert merged.status == PRStatus.MERGED
    assert again.merged_at == merged.merged_at

    workload = await pr_store.list_by_reviewer("u2")
    assert [pr.pull_request_id for pr in workload] == ["pr-1", "pr-2"]

    stats = await pr_store.assignment_stats()
    assert stats.by_user == {"u2": 2, "u3": 1}
    assert stats.by_pull_request == {"pr-1": 2, "pr-2": 1}


@pytest.mark.asyncio
async def test_storage_failure_becomes_internal_issue() -> None:
    factory = MagicMock(side_effect=OperationalError("SELECT 1", {}, Exception("down")))
    store = UserStore(factory)

    with pytest.raises(InternalIssueError):
        await store.get_user("u1")


@pytest.mark.asyncio
async def test_concurrent_reassign_of_same_reviewer(
    team_store: TeamStore, user_store: UserStore, pr_store: PullRequestStore
) -> None:
    """Of two concurrent swaps of one reviewer, the conditional update lets one win."""
    await team_store.create_team(
        "big", [MemberSpec(f"b{i}", f"User {i}") for i in range(1, 7)]
    )
    service = PullRequestService(user_store, pr_store, CandidateSelector(random.Random(7)))
    created = await service.create_pull_request("pr-c", "Race", "b1")
    old = created.assigned_reviewers[0]

    results = await asyncio.gather(
        service.reassign_reviewer("pr-c", old),
        service.reassign_reviewer("pr-c", old),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, BaseException)]
    failures = [r for r in results if isinstance(r, BaseException)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], NotAssignedError)

    pr = await pr_store.get_pull_request("pr-c")
    _, replaced_by = successes[0]
    assert old not in pr.assigned_reviewers
    assert replaced_by in pr.assigned_reviewers
    assert "b1" not in pr.assigned_reviewers
    assert len(pr.assigned_reviewers) == 2
    assert len(set(pr.assigned_reviewers)) == 2
