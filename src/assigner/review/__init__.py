"""Review assignment core for Assigner.

This module implements reviewer selection, the pull request lifecycle
(creation with automatic assignment, idempotent merge, reviewer
reassignment), team and user services, and the storage protocols those
services depend on.
"""

from __future__ import annotations

from assigner.review.lifecycle import PullRequestService
from assigner.review.ports import (
    AssignmentStats,
    MemberSpec,
    PullRequestReader,
    PullRequestStorage,
    PullRequestWriter,
    TeamReader,
    TeamStorage,
    TeamWriter,
    UserReader,
    UserStorage,
    UserWriter,
)
from assigner.review.selector import (
    CandidateSelector,
    SelectionError,
    SelectionExhaustedError,
)
from assigner.review.state_machine import (
    VALID_TRANSITIONS,
    is_terminal,
    validate_transition,
)
from assigner.review.teams import TeamService, UserService

__all__ = [
    # Lifecycle
    "PullRequestService",
    "TeamService",
    "UserService",
    # Selection
    "CandidateSelector",
    "SelectionError",
    "SelectionExhaustedError",
    # State machine
    "VALID_TRANSITIONS",
    "is_terminal",
    "validate_transition",
    # Storage protocols
    "AssignmentStats",
    "MemberSpec",
    "PullRequestReader",
    "PullRequestStorage",
    "PullRequestWriter",
    "TeamReader",
    "TeamStorage",
    "TeamWriter",
    "UserReader",
    "UserStorage",
    "UserWriter",
]
