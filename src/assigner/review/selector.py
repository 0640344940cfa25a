"""Random reviewer selection.

Reviewers are drawn uniformly from an eligible pool without replacement.
The randomness source is pluggable: production uses the operating system
CSPRNG, tests pass a seeded ``random.Random``.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

import structlog

from assigner.database.models import User

logger = structlog.get_logger(__name__)


class SelectionError(Exception):
    """The randomness source failed."""


class SelectionExhaustedError(SelectionError):
    """A choice was requested from an empty pool."""


class CandidateSelector:
    """Picks reviewers uniformly at random from a candidate pool.

    Usage:
        selector = CandidateSelector()
        reviewers = selector.pick_reviewers(teammates, 2)
        replacement = selector.pick_one(remaining)
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.SystemRandom()

    def pick_reviewers(self, pool: Sequence[User], count: int) -> list[User]:
        """Pick up to ``count`` distinct users from ``pool``.

        Every subset of size ``min(count, len(pool))`` is equally likely.
        The order of the result carries no meaning.

        Args:
            pool: Eligible users. Duplicate ids are collapsed.
            count: Number of reviewers wanted.

        Returns:
            The chosen users; empty if ``count <= 0`` or the pool is empty,
            and the whole pool if it is not larger than ``count``.

        Raises:
            SelectionError: If the randomness source fails.
        """
        unique = list({user.user_id: user for user in pool}.values())
        if count <= 0 or not unique:
            return []
        if len(unique) <= count:
            return unique

        try:
            return self._rng.sample(unique, count)
        except (OSError, NotImplementedError) as e:
            logger.error("random_source_failed", error=str(e))
            raise SelectionError(f"Random source failed: {e}") from e

    def pick_one(self, pool: Sequence[User]) -> User:
        """Pick a single user uniformly from ``pool``.

        Raises:
            SelectionExhaustedError: If the pool is empty.
            SelectionError: If the randomness source fails.
        """
        if not pool:
            raise SelectionExhaustedError("No candidates to choose from")

        try:
            return self._rng.choice(list(pool))
        except (OSError, NotImplementedError) as e:
            logger.error("random_source_failed", error=str(e))
            raise SelectionError(f"Random source failed: {e}") from e
