from __future__ import annotations

from enum import Enum
from typing import List, Tuple
import logging

from .store.base import KarmaBackend

logger = logging.getLogger(__name__)


class Direction(Enum):
    ASCENDING = "ascending"     # worst terms first
    DESCENDING = "descending"   # best terms first


class ScoreStore:
    """
    Term scores plus per-term modification counters.

    Scores live in one ordered collection ("terms"); who modified a term
    and how often lives in "modified:<term>". Absent terms score 0.
    """

    TERMS_KEY = "terms"

    # Hard cap on leaderboard size regardless of what the caller asks for
    MAX_LIST_SIZE = 24

    def __init__(self, backend: KarmaBackend) -> None:
        self._backend = backend

    @staticmethod
    def _modified_key(term: str) -> str:
        return f"modified:{term}"

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def increment(self, term: str, delta: int) -> int:
        score = self._backend.incr_score(self.TERMS_KEY, term, delta)
        logger.info("[SCORES] %s %+d -> %d", term, delta, int(score))
        return int(score)

    def score(self, term: str) -> int:
        score = self._backend.get_score(self.TERMS_KEY, term)
        return 0 if score is None else int(score)

    def top_n(self, direction: Direction, n: int) -> List[Tuple[str, int]]:
        """
        Ranked (term, score) pairs, at most ``min(n, MAX_LIST_SIZE)`` long.
        """
        n = min(n, self.MAX_LIST_SIZE)
        if n <= 0:
            return []

        rows = self._backend.range(
            self.TERMS_KEY,
            0,
            n - 1,
            descending=direction is Direction.DESCENDING,
        )

        logger.debug("[SCORES] top_n | direction=%s | n=%d | rows=%d", direction.value, n, len(rows))
        return [(term, int(score)) for term, score in rows]

    def remove(self, term: str) -> bool:
        removed = self._backend.remove_member(self.TERMS_KEY, term)
        if removed:
            logger.info("[SCORES] Removed %s", term)
        return removed

    # ------------------------------------------------------------------
    # Modification Counters
    # ------------------------------------------------------------------

    def record_modification(self, term: str, user_id: str) -> int:
        return int(self._backend.incr_score(self._modified_key(term), str(user_id), 1))

    def modifications(self, term: str) -> List[Tuple[str, int]]:
        """(user_id, count) pairs, most active user first."""
        rows = self._backend.range(self._modified_key(term), 0, -1, descending=True)
        return [(user_id, int(count)) for user_id, count in rows]

    def clear_modifications(self, term: str) -> None:
        self._backend.delete(self._modified_key(term))
