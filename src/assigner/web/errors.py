"""Error responses for the Assigner HTTP API.

Every error leaves the service as ``{"error": {"code", "message"}}``.
Domain errors carry their own code; the status comes from a fixed table.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from assigner.errors import MESSAGES, AppError, ErrorCode
from assigner.logging import get_logger

logger = get_logger(__name__)

INVALID_REQUEST = "INVALID_REQUEST"
REQUEST_TIMEOUT = "REQUEST_TIMEOUT"

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.TEAM_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PR_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.PR_MERGED: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_ASSIGNED: status.HTTP_409_CONFLICT,
    ErrorCode.NO_CANDIDATE: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INTERNAL_ISSUE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the uniform error body."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map a domain error to its HTTP status."""
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log = logger.warning if status_code < 500 else logger.error
    log(
        "request_rejected",
        path=request.url.path,
        code=exc.code.value,
        status_code=status_code,
    )
    return error_response(status_code, exc.code.value, exc.message)


def _validation_message(errors: list[dict[str, Any]]) -> str:
    for error in errors:
        loc = error.get("loc") or ()
        if len(loc) >= 2 and loc[0] == "query":
            return f"{loc[1]} query parameter is required"
    return "invalid JSON"


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed bodies and missing query parameters as INVALID_REQUEST."""
    logger.info("request_invalid", path=request.url.path, errors=len(exc.errors()))
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        INVALID_REQUEST,
        _validation_message(list(exc.errors())),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report unexpected failures with the INTERNAL_ISSUE body."""
    logger.error("request_crashed", path=request.url.path, error=str(exc), exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ISSUE.value,
        MESSAGES[ErrorCode.INTERNAL_ISSUE],
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on ``app``."""
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
