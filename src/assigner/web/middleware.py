"""HTTP middleware for Assigner.

This module provides:
- Request logging with method, path, status code and duration
- Correlation IDs taken from (or added to) the X-Correlation-ID header
- A per-request time limit answering 504 when a handler overruns

Example:
    >>> from fastapi import FastAPI
    >>> from assigner.web.middleware import (
    ...     RequestLoggingMiddleware,
    ...     RequestTimeoutMiddleware,
    ... )
    >>>
    >>> app = FastAPI()
    >>> app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=10.0)
    >>> app.add_middleware(RequestLoggingMiddleware)
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import TYPE_CHECKING

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware

from assigner.logging import get_logger, set_correlation_id
from assigner.web.errors import REQUEST_TIMEOUT, error_response

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with timing and a correlation ID.

    The correlation ID is read from the X-Correlation-ID header when
    present, otherwise a new UUID is generated. It is bound to every log
    line emitted while handling the request and echoed on the response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.perf_counter()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query=str(request.url.query) if request.url.query else None,
        )

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
                exc_info=True,
            )
            raise

        finally:
            set_correlation_id(None)


class RequestTimeoutMiddleware:
    """Cancels request handling that runs past ``timeout_seconds``.

    The handler task itself is cancelled, interrupting any awaited database
    call; its session is rolled back on close. If no response has started
    yet the client receives 504 REQUEST_TIMEOUT.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_wrapper),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "request_timed_out",
                method=scope.get("method"),
                path=scope.get("path"),
                timeout_seconds=self.timeout_seconds,
                response_started=response_started,
            )
            if response_started:
                return
            response = error_response(
                status.HTTP_504_GATEWAY_TIMEOUT,
                REQUEST_TIMEOUT,
                "request timed out",
            )
            await response(scope, receive, send)
