"""Pull request endpoints for Assigner.

This module provides:
- POST /pullRequest/create - create a PR and auto-assign reviewers
- POST /pullRequest/merge - merge a PR (idempotent)
- POST /pullRequest/reassign - replace one reviewer

Timestamps are rendered as ISO-8601 UTC under ``createdAt`` and
``mergedAt``; ``mergedAt`` is left out until the PR is merged.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from pydantic import AliasChoices, BaseModel, Field, field_validator

from assigner.database.models import PRStatus
from assigner.logging import get_logger
from assigner.review.lifecycle import PullRequestService
from assigner.web.dependencies import get_pull_request_service

logger = get_logger(__name__)


class PullRequestCreate(BaseModel):
    """Request schema for creating a pull request.

    Attributes:
        pull_request_id: Globally unique identifier chosen by the caller
        pull_request_name: Display name
        author_id: Identifier of the authoring user
    """

    pull_request_id: str = Field(..., min_length=1)
    pull_request_name: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)


class PullRequestMerge(BaseModel):
    pull_request_id: str = Field(..., min_length=1)


class PullRequestReassign(BaseModel):
    """Request schema for replacing a reviewer.

    ``old_user_id`` is accepted as an alias of ``old_reviewer_id``.
    """

    pull_request_id: str = Field(..., min_length=1)
    old_reviewer_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("old_reviewer_id", "old_user_id"),
    )


class PullRequestSchema(BaseModel):
    """A pull request with its assigned reviewers."""

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PRStatus
    assigned_reviewers: list[str]
    created_at: datetime = Field(..., serialization_alias="createdAt")
    merged_at: datetime | None = Field(default=None, serialization_alias="mergedAt")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "merged_at")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC and normalize aware ones to UTC."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class PullRequestResponse(BaseModel):
    pr: PullRequestSchema


class ReassignResponse(BaseModel):
    pr: PullRequestSchema
    replaced_by: str


def create_pull_requests_router() -> APIRouter:
    """Create the pull request router.

    Routes:
        POST /pullRequest/create - Create a pull request
        POST /pullRequest/merge - Merge a pull request
        POST /pullRequest/reassign - Replace a reviewer
    """
    router = APIRouter(prefix="/pullRequest", tags=["pull-requests"])

    @router.post(
        "/create",
        response_model=PullRequestResponse,
        response_model_exclude_none=True,
        status_code=http_status.HTTP_201_CREATED,
    )
    async def create_pull_request(
        pr_data: PullRequestCreate,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> PullRequestResponse:
        """Create a pull request and assign up to two reviewers.

        Raises:
            NotFoundError: 404 if the author does not exist
            PRExistsError: 409 if the id is taken
        """
        pr = await service.create_pull_request(
            pr_data.pull_request_id,
            pr_data.pull_request_name,
            pr_data.author_id,
        )
        return PullRequestResponse(pr=PullRequestSchema.model_validate(pr))

    @router.post(
        "/merge",
        response_model=PullRequestResponse,
        response_model_exclude_none=True,
    )
    async def merge_pull_request(
        merge_data: PullRequestMerge,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> PullRequestResponse:
        """Merge a pull request. Repeating the call returns the same result.

        Raises:
            NotFoundError: 404 if the pull request does not exist
        """
        pr = await service.merge(merge_data.pull_request_id)
        return PullRequestResponse(pr=PullRequestSchema.model_validate(pr))

    @router.post(
        "/reassign",
        response_model=ReassignResponse,
        response_model_exclude_none=True,
    )
    async def reassign_reviewer(
        reassign_data: PullRequestReassign,
        service: PullRequestService = Depends(get_pull_request_service),  # noqa: B008
    ) -> ReassignResponse:
        """Replace one reviewer with another active member of their team.

        Raises:
            NotFoundError: 404 if the pull request or reviewer do not exist
            PRMergedError: 409 if the pull request is merged
            NotAssignedError: 409 if the reviewer is not assigned
            NoCandidateError: 409 if nobody can take over
        """
        pr, replaced_by = await service.reassign_reviewer(
            reassign_data.pull_request_id,
            reassign_data.old_reviewer_id,
        )
        logger.info(
            "reviewer_reassigned_via_api",
            pull_request_id=pr.pull_request_id,
            replaced_by=replaced_by,
        )
        return ReassignResponse(
            pr=PullRequestSchema.model_validate(pr),
            replaced_by=replaced_by,
        )

    return router
