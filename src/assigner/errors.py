"""Domain error taxonomy for Assigner.

Every failure that crosses a component boundary is one of the AppError
subclasses below. Each carries a machine-readable code and a fixed
human-readable message; the HTTP layer maps codes to status codes and
nothing in the core knows about the wire.
"""

from __future__ import annotations

import enum


class ErrorCode(str, enum.Enum):
    """Machine-readable error codes."""

    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ISSUE = "INTERNAL_ISSUE"


MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.TEAM_EXISTS: "team_name already exists",
    ErrorCode.PR_EXISTS: "PR id already exists",
    ErrorCode.PR_MERGED: "cannot reassign on merged PR",
    ErrorCode.NOT_ASSIGNED: "reviewer is not assigned to this PR",
    ErrorCode.NO_CANDIDATE: "no active replacement candidate in team",
    ErrorCode.NOT_FOUND: "resource not found",
    ErrorCode.INTERNAL_ISSUE: "internal server issue, please try again",
}


class AppError(Exception):
    """Base class for all domain errors.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message for the code.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ISSUE

    def __init__(self, message: str | None = None):
        self.message = message or MESSAGES[self.code]
        super().__init__(f"{self.code.value}: {self.message}")


class TeamExistsError(AppError):
    """A team with the requested name already exists."""

    code = ErrorCode.TEAM_EXISTS


class PRExistsError(AppError):
    """A pull request with the requested id already exists."""

    code = ErrorCode.PR_EXISTS


class PRMergedError(AppError):
    """The operation is not valid on a merged pull request."""

    code = ErrorCode.PR_MERGED


class NotAssignedError(AppError):
    """The reviewer is not currently assigned to the pull request."""

    code = ErrorCode.NOT_ASSIGNED


class NoCandidateError(AppError):
    """No eligible replacement reviewer exists."""

    code = ErrorCode.NO_CANDIDATE


class NotFoundError(AppError):
    """A referenced team, user or pull request does not exist."""

    code = ErrorCode.NOT_FOUND


class InternalIssueError(AppError):
    """Unexpected persistence or selection failure."""

    code = ErrorCode.INTERNAL_ISSUE
