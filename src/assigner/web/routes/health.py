"""Health check endpoints for Assigner.

This module provides:
- GET /health - liveness, always ``{"status": "ok"}`` while the process serves
- GET /health/ready - readiness, verifies the database answers queries
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text

from assigner.logging import get_logger
from assigner.web.dependencies import get_session_factory

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response model.

    Attributes:
        status: "ok" or "unhealthy"
        database: "connected" or "disconnected"
    """

    status: str
    database: str


def create_health_router() -> APIRouter:
    """Create health check router.

    Routes:
        GET /health - Liveness check
        GET /health/ready - Readiness check with database verification
    """
    router = APIRouter(prefix="/health", tags=["health"])

    @router.get("", response_model=HealthResponse)
    async def health() -> dict[str, Any]:
        return {"status": "ok"}

    @router.get("/ready", response_model=ReadinessResponse)
    async def readiness(
        session_factory: async_sessionmaker[AsyncSession] = Depends(  # noqa: B008
            get_session_factory
        ),
    ) -> Any:
        """Readiness check with database connectivity verification.

        Answers 503 while the database cannot be reached so load balancers
        stop routing traffic here.
        """
        try:
            async with session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning(
                "readiness_check_failed",
                database="disconnected",
                error=str(exc),
            )
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "database": "disconnected"},
            )

        logger.debug("readiness_check_passed", database="connected")
        return {"status": "ok", "database": "connected"}

    return router
