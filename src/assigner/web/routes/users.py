"""User endpoints for Assigner.

This module provides:
- POST /users/setIsActive - enable or disable a user as a reviewer
- GET /users/getReview - list the PRs a user currently reviews
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from assigner.database.models import PRStatus
from assigner.logging import get_logger
from assigner.review.teams import UserService
from assigner.web.dependencies import get_user_service

logger = get_logger(__name__)


class SetActiveRequest(BaseModel):
    """Request schema for toggling a user's active flag.

    Attributes:
        user_id: Identifier of the user
        is_active: New value of the flag
    """

    user_id: str = Field(..., min_length=1)
    is_active: bool


class UserSchema(BaseModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool


class UserResponse(BaseModel):
    user: UserSchema


class PullRequestShort(BaseModel):
    """A pull request without reviewer details."""

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PRStatus

    model_config = {"from_attributes": True}


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShort]


def create_users_router() -> APIRouter:
    """Create the user router.

    Routes:
        POST /users/setIsActive - Set a user's active flag
        GET /users/getReview - Pull requests assigned to a user
    """
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/setIsActive", response_model=UserResponse)
    async def set_is_active(
        request_data: SetActiveRequest,
        service: UserService = Depends(get_user_service),  # noqa: B008
    ) -> UserResponse:
        """Set whether a user may be picked as a reviewer.

        Raises:
            NotFoundError: 404 if the user does not exist
        """
        user, team = await service.set_active(request_data.user_id, request_data.is_active)
        return UserResponse(
            user=UserSchema(
                user_id=user.user_id,
                username=user.username,
                team_name=team.team_name,
                is_active=user.is_active,
            )
        )

    @router.get("/getReview", response_model=UserReviewsResponse)
    async def get_review(
        user_id: str = Query(..., min_length=1),
        service: UserService = Depends(get_user_service),  # noqa: B008
    ) -> UserReviewsResponse:
        """List the pull requests a user is assigned to review.

        Raises:
            NotFoundError: 404 if the user does not exist
        """
        pull_requests = await service.get_user_reviews(user_id)

        logger.debug("user_reviews_listed", user_id=user_id, count=len(pull_requests))
        return UserReviewsResponse(
            user_id=user_id,
            pull_requests=[PullRequestShort.model_validate(pr) for pr in pull_requests],
        )

    return router
