"""Team endpoints for Assigner.

This module provides:
- POST /team/add - create a team and bind its members
- GET /team/get - read a team with its members

Example:
    >>> from fastapi import FastAPI
    >>> from assigner.web.routes.teams import create_teams_router
    >>>
    >>> app = FastAPI()
    >>> app.include_router(create_teams_router())
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from pydantic import BaseModel, Field

from assigner.logging import get_logger
from assigner.review.ports import MemberSpec
from assigner.review.teams import TeamService
from assigner.web.dependencies import get_team_service

logger = get_logger(__name__)


class TeamMember(BaseModel):
    """A member as it appears inside a team.

    Attributes:
        user_id: Globally unique user identifier
        username: Display name
        is_active: Whether the user may be picked as a reviewer; false when omitted
    """

    user_id: str = Field(..., min_length=1)
    username: str
    is_active: bool = False

    model_config = {"from_attributes": True}


class TeamCreate(BaseModel):
    """Request schema for creating a team.

    Attributes:
        team_name: Unique team name
        members: Team members, at least one
    """

    team_name: str = Field(..., min_length=1)
    members: list[TeamMember] = Field(..., min_length=1)


class TeamSchema(BaseModel):
    """A team with its current members."""

    team_name: str
    members: list[TeamMember]

    model_config = {"from_attributes": True}


class TeamResponse(BaseModel):
    team: TeamSchema


def create_teams_router() -> APIRouter:
    """Create the team router.

    Routes:
        POST /team/add - Create a team
        GET /team/get - Get a team by name
    """
    router = APIRouter(prefix="/team", tags=["teams"])

    @router.post(
        "/add",
        response_model=TeamResponse,
        status_code=http_status.HTTP_201_CREATED,
    )
    async def add_team(
        team_data: TeamCreate,
        service: TeamService = Depends(get_team_service),  # noqa: B008
    ) -> TeamResponse:
        """Create a team.

        Members that already belong to another team are moved into this one.

        Raises:
            TeamExistsError: 400 if the team name is taken
        """
        members = [
            MemberSpec(
                user_id=member.user_id,
                username=member.username,
                is_active=member.is_active,
            )
            for member in team_data.members
        ]
        team = await service.create_team(team_data.team_name, members)

        logger.info("team_created_via_api", team_name=team.team_name)
        return TeamResponse(team=TeamSchema.model_validate(team))

    @router.get("/get", response_model=TeamSchema)
    async def get_team(
        team_name: str = Query(..., min_length=1),
        service: TeamService = Depends(get_team_service),  # noqa: B008
    ) -> TeamSchema:
        """Get a team by name.

        Raises:
            NotFoundError: 404 if no team has this name
        """
        team = await service.get_team(team_name)
        return TeamSchema.model_validate(team)

    return router
