"""FastAPI route definitions for the Assigner HTTP API."""

from __future__ import annotations

from assigner.web.routes.health import create_health_router
from assigner.web.routes.pull_requests import create_pull_requests_router
from assigner.web.routes.stats import create_stats_router
from assigner.web.routes.teams import create_teams_router
from assigner.web.routes.users import create_users_router

__all__ = [
    "create_health_router",
    "create_pull_requests_router",
    "create_stats_router",
    "create_teams_router",
    "create_users_router",
]
