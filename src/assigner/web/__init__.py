"""HTTP interface for Assigner.

FastAPI application exposing team, user and pull request endpoints plus
health checks and assignment statistics.
"""

from __future__ import annotations

from assigner.web.app import create_app
from assigner.web.middleware import RequestLoggingMiddleware, RequestTimeoutMiddleware

__all__ = [
    "create_app",
    "RequestLoggingMiddleware",
    "RequestTimeoutMiddleware",
]
