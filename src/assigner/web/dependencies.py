"""FastAPI dependencies wiring stores and services from app state.

Stores are cheap wrappers around the shared session factory, so a fresh
service graph is built per request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Request

from assigner.database.stores import PullRequestStore, TeamStore, UserStore
from assigner.review.lifecycle import PullRequestService
from assigner.review.selector import CandidateSelector
from assigner.review.teams import TeamService, UserService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from assigner.config import AssignerConfig


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Session factory created by the application lifespan."""
    return request.app.state.session_factory  # type: ignore[return-value]


def get_selector(request: Request) -> CandidateSelector:
    return request.app.state.selector  # type: ignore[return-value]


def get_config(request: Request) -> AssignerConfig:
    return request.app.state.config  # type: ignore[return-value]


def get_pull_request_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
    selector: CandidateSelector = Depends(get_selector),  # noqa: B008
    config: AssignerConfig = Depends(get_config),  # noqa: B008
) -> PullRequestService:
    return PullRequestService(
        users=UserStore(session_factory),
        pull_requests=PullRequestStore(session_factory),
        selector=selector,
        reviewer_quota=config.review.reviewer_quota,
    )


def get_team_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
) -> TeamService:
    return TeamService(TeamStore(session_factory))


def get_user_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
) -> UserService:
    return UserService(
        users=UserStore(session_factory),
        teams=TeamStore(session_factory),
        pull_requests=PullRequestStore(session_factory),
    )
