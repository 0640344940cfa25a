"""Pull request state machine for Assigner.

A pull request starts OPEN and can be merged exactly once. MERGED is
terminal: reviewers can no longer be changed and merging again is a no-op.
"""

from __future__ import annotations

from assigner.database.models.pull_request import PRStatus


VALID_TRANSITIONS: dict[PRStatus, set[PRStatus]] = {
    PRStatus.OPEN: {PRStatus.MERGED},
    PRStatus.MERGED: set(),  # Terminal state
}


def validate_transition(current: PRStatus, target: PRStatus) -> bool:
    """Validate if a state transition is allowed.

    Args:
        current: Current pull request status.
        target: Target pull request status.

    Returns:
        True if the transition is valid according to VALID_TRANSITIONS.
    """
    return target in VALID_TRANSITIONS.get(current, set())


def is_terminal(status: PRStatus) -> bool:
    """Whether no further transitions are possible from ``status``."""
    return not VALID_TRANSITIONS.get(status)
