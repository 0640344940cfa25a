"""Pull request lifecycle for Assigner.

Creates pull requests with randomly chosen reviewers from the author's
team, merges them idempotently, and replaces individual reviewers.

Reassignment is optimistic: the pull request and candidate pool are read
without holding a lock, and the conditional reviewer swap in storage is
the only serialization point. Of two concurrent reassignments of the same
reviewer, one succeeds and the other fails with ``NotAssignedError``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from assigner.database.models import PRStatus, PullRequest, User
from assigner.errors import (
    InternalIssueError,
    NoCandidateError,
    NotAssignedError,
    PRMergedError,
)
from assigner.review.ports import AssignmentStats, PullRequestStorage, UserReader
from assigner.review.selector import (
    CandidateSelector,
    SelectionError,
    SelectionExhaustedError,
)
from assigner.review.state_machine import is_terminal, validate_transition

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_REVIEWER_QUOTA = 2


class PullRequestService:
    """Manages pull requests and their reviewer assignments.

    Attributes:
        reviewer_quota: Reviewers auto-assigned on creation.
    """

    def __init__(
        self,
        users: UserReader,
        pull_requests: PullRequestStorage,
        selector: CandidateSelector,
        reviewer_quota: int = DEFAULT_REVIEWER_QUOTA,
    ) -> None:
        self._users = users
        self._pull_requests = pull_requests
        self._selector = selector
        self.reviewer_quota = reviewer_quota
        self.logger = logger.bind(component="PullRequestService")

    async def create_pull_request(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
    ) -> PullRequest:
        """Create an OPEN pull request and assign reviewers.

        Up to ``reviewer_quota`` reviewers are drawn from the active members
        of the author's team, excluding the author. Fewer are assigned when
        the team is small.

        Raises:
            NotFoundError: If the author does not exist.
            PRExistsError: If the pull request id is taken.
            InternalIssueError: On storage or randomness failure.
        """
        author = await self._users.get_user(author_id)
        pool = await self._users.list_active_teammates(author.team_id, author.user_id)

        reviewers = self._select(
            lambda: self._selector.pick_reviewers(pool, self.reviewer_quota),
            pull_request_id,
        )

        pr = await self._pull_requests.create(
            pull_request_id,
            pull_request_name,
            author_id,
            [reviewer.user_id for reviewer in reviewers],
        )

        self.logger.info(
            "reviewers_assigned",
            pull_request_id=pull_request_id,
            author_id=author_id,
            pool_size=len(pool),
            reviewers=pr.assigned_reviewers,
        )
        return pr

    async def merge(self, pull_request_id: str) -> PullRequest:
        """Merge a pull request.

        Merging an already merged pull request returns it unchanged, so
        ``merged_at`` always records the first merge.

        Raises:
            NotFoundError: If the pull request does not exist.
        """
        pr = await self._pull_requests.get_pull_request(pull_request_id)

        if not validate_transition(pr.status, PRStatus.MERGED):
            self.logger.debug("merge_noop", pull_request_id=pull_request_id)
            return pr

        return await self._pull_requests.mark_merged(pull_request_id)

    async def reassign_reviewer(
        self,
        pull_request_id: str,
        old_reviewer_id: str,
    ) -> tuple[PullRequest, str]:
        """Replace one reviewer with another from the same team.

        The replacement is an active member of the old reviewer's team who
        is neither the author nor already assigned (the reviewer being
        replaced included).

        Returns:
            Tuple of (updated pull request, id of the new reviewer).

        Raises:
            NotFoundError: If the pull request or old reviewer do not exist.
            PRMergedError: If the pull request is merged.
            NotAssignedError: If the old reviewer is not assigned.
            NoCandidateError: If nobody can take over.
        """
        pr = await self._pull_requests.get_pull_request(pull_request_id)

        if is_terminal(pr.status):
            raise PRMergedError()

        current = pr.assigned_reviewers
        if old_reviewer_id not in current:
            raise NotAssignedError()

        old_reviewer = await self._users.get_user(old_reviewer_id)
        excluded = {pr.author_id, *current}
        teammates = await self._users.list_active_teammates(
            old_reviewer.team_id, old_reviewer.user_id
        )
        pool = [user for user in teammates if user.user_id not in excluded]

        if not pool:
            self.logger.info(
                "no_replacement_candidate",
                pull_request_id=pull_request_id,
                old_reviewer_id=old_reviewer_id,
            )
            raise NoCandidateError()

        replacement: User = self._select(
            lambda: self._selector.pick_one(pool),
            pull_request_id,
        )

        await self._pull_requests.replace_reviewer(
            pull_request_id, old_reviewer_id, replacement.user_id
        )
        updated = await self._pull_requests.get_pull_request(pull_request_id)

        self.logger.info(
            "reviewer_reassigned",
            pull_request_id=pull_request_id,
            old_reviewer_id=old_reviewer_id,
            replaced_by=replacement.user_id,
        )
        return updated, replacement.user_id

    async def assignment_stats(self) -> AssignmentStats:
        """Current review assignment counts per reviewer and per pull request."""
        return await self._pull_requests.assignment_stats()

    def _select(self, pick: Callable[[], T], pull_request_id: str) -> T:
        try:
            return pick()
        except SelectionExhaustedError as e:
            raise NoCandidateError() from e
        except SelectionError as e:
            self.logger.error(
                "reviewer_selection_failed",
                pull_request_id=pull_request_id,
                error=str(e),
            )
            raise InternalIssueError() from e
