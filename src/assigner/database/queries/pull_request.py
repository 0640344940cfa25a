"""Pull request query functions for Assigner.

Provides async functions for creating pull requests with their initial
reviewers, merging, swapping a single reviewer, and reading reviewer
workloads.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from assigner.database.models.base import utcnow
from assigner.database.models.pull_request import PRStatus, PullRequest, Review
from assigner.errors import NoCandidateError, NotAssignedError, PRExistsError

logger = structlog.get_logger(__name__)


async def create_pull_request(
    session: AsyncSession,
    pull_request_id: str,
    pull_request_name: str,
    author_id: str,
    reviewer_ids: Sequence[str],
) -> PullRequest:
    """Create an OPEN pull request and its review rows in one transaction.

    Args:
        session: Active async database session.
        pull_request_id: Caller-supplied unique identifier.
        pull_request_name: Display name.
        author_id: Identifier of the authoring user.
        reviewer_ids: Reviewers to assign (at most two, distinct).

    Returns:
        The newly created PullRequest with its reviews loaded.

    Raises:
        PRExistsError: If a pull request with this id already exists.
    """
    now = utcnow()
    pr = PullRequest(
        pull_request_id=pull_request_id,
        pull_request_name=pull_request_name,
        author_id=author_id,
        status=PRStatus.OPEN,
        created_at=now,
        reviews=[Review(reviewer_id=rid, assigned_at=now) for rid in reviewer_ids],
    )
    session.add(pr)

    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise PRExistsError() from e

    logger.info(
        "pull_request_created",
        pull_request_id=pull_request_id,
        author_id=author_id,
        reviewers=list(reviewer_ids),
    )

    return pr


async def get_pull_request(
    session: AsyncSession,
    pull_request_id: str,
) -> PullRequest | None:
    """Retrieve a pull request and its reviewers by ID.

    Args:
        session: Active async database session.
        pull_request_id: Identifier of the pull request.

    Returns:
        The PullRequest instance if found, None otherwise.
    """
    stmt = (
        select(PullRequest)
        .where(PullRequest.pull_request_id == pull_request_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def mark_merged(
    session: AsyncSession,
    pull_request_id: str,
) -> PullRequest | None:
    """Set a pull request to MERGED, keeping the first merge timestamp.

    ``merged_at`` is only written when it is still NULL, so repeating the
    call never moves it.

    Args:
        session: Active async database session.
        pull_request_id: Identifier of the pull request.

    Returns:
        The merged PullRequest, or None if it does not exist.
    """
    stmt = (
        update(PullRequest)
        .where(PullRequest.pull_request_id == pull_request_id)
        .values(
            status=PRStatus.MERGED,
            merged_at=func.coalesce(PullRequest.merged_at, utcnow()),
        )
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    await session.commit()

    if result.rowcount == 0:  # type: ignore[union-attr]
        return None

    logger.info("pull_request_merged", pull_request_id=pull_request_id)
    return await get_pull_request(session, pull_request_id)


async def replace_reviewer(
    session: AsyncSession,
    pull_request_id: str,
    old_reviewer_id: str,
    new_reviewer_id: str,
) -> None:
    """Swap one assigned reviewer for another.

    The UPDATE only matches the row binding ``old_reviewer_id`` to the pull
    request, so of two concurrent swaps of the same reviewer exactly one
    succeeds.

    Args:
        session: Active async database session.
        pull_request_id: Identifier of the pull request.
        old_reviewer_id: Reviewer being replaced.
        new_reviewer_id: Reviewer taking over.

    Raises:
        NotAssignedError: If ``old_reviewer_id`` is no longer assigned.
        NoCandidateError: If ``new_reviewer_id`` was assigned concurrently.
    """
    stmt = (
        update(Review)
        .where(
            Review.pull_request_id == pull_request_id,
            Review.reviewer_id == old_reviewer_id,
        )
        .values(reviewer_id=new_reviewer_id, assigned_at=utcnow())
        .execution_options(synchronize_session=False)
    )

    try:
        result = await session.execute(stmt)
    except IntegrityError as e:
        await session.rollback()
        raise NoCandidateError() from e

    if result.rowcount == 0:  # type: ignore[union-attr]
        await session.rollback()
        raise NotAssignedError()

    await session.commit()

    logger.info(
        "reviewer_replaced",
        pull_request_id=pull_request_id,
        old_reviewer_id=old_reviewer_id,
        new_reviewer_id=new_reviewer_id,
    )


async def list_pull_requests_by_reviewer(
    session: AsyncSession,
    reviewer_id: str,
) -> list[PullRequest]:
    """List pull requests the user is currently assigned to review.

    Args:
        session: Active async database session.
        reviewer_id: Identifier of the reviewer.

    Returns:
        Pull requests ordered by creation time.
    """
    stmt = (
        select(PullRequest)
        .join(Review, Review.pull_request_id == PullRequest.pull_request_id)
        .where(Review.reviewer_id == reviewer_id)
        .order_by(PullRequest.created_at, PullRequest.pull_request_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_assignments(
    session: AsyncSession,
) -> tuple[dict[str, int], dict[str, int]]:
    """Count review rows per reviewer and per pull request.

    Returns:
        Tuple of (assignments by reviewer id, assignments by pull request id).
    """
    by_user_stmt = select(Review.reviewer_id, func.count()).group_by(Review.reviewer_id)
    by_pr_stmt = select(Review.pull_request_id, func.count()).group_by(
        Review.pull_request_id
    )

    by_user = {row[0]: row[1] for row in (await session.execute(by_user_stmt)).all()}
    by_pr = {row[0]: row[1] for row in (await session.execute(by_pr_stmt)).all()}

    return by_user, by_pr
