"""Assignment statistics endpoint for Assigner."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from assigner.review.lifecycle import PullRequestService
from assigner.web.dependencies import get_pull_request_service


class AssignmentStatsResponse(BaseModel):
    """Current review assignment counts.

    Attributes:
        assignments_by_user: Number of PRs each reviewer is assigned to
        assignments_by_pr: Number of reviewers assigned to each PR
    """

    assignments_by_user: dict[str, int]
    assignments_by_pr: dict[str, int]


def create_stats_router() -> APIRouter:
    """Create the statistics router.

    Routes:
        GET /stats/assignments - Assignment counts per reviewer and per PR
    """
    router = APIRouter(prefix="/stats", tags=["stats"])

    @router.get("/assignments", response_model=AssignmentStatsResponse)
    async def get_assignments(
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> AssignmentStatsResponse:
        stats = await service.assignment_stats()
        return AssignmentStatsResponse(
            assignments_by_user=stats.by_user,
            assignments_by_pr=stats.by_pull_request,
        )

    return router
