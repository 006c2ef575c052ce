from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple


class KarmaBackend(ABC):
    """
    Abstract ordered key-score store the karma engine is written against.

    A backend provides three kinds of keyed collections:
        • Ordered collections mapping member → float score
        • Unordered sets of members
        • Plain values with an expiry

    Backends must:
        • Apply score increments atomically (no read-then-write)
        • Treat reads and removals of absent keys as empty / no-op
        • Propagate their own I/O failures to the caller unchanged
        • Keep their keyspace private (prefixing is the backend's job)
    """

    # ------------------------------------------------------------------
    # Ordered Collections
    # ------------------------------------------------------------------

    @abstractmethod
    def incr_score(self, key: str, member: str, amount: float) -> float:
        """
        Atomically add ``amount`` to ``member``'s score, creating it at 0.

        Returns
        -------
        float
            The new score.
        """
        raise NotImplementedError

    @abstractmethod
    def add_scored(self, key: str, member: str, score: float) -> None:
        """Insert or overwrite ``member`` with an explicit score."""
        raise NotImplementedError

    @abstractmethod
    def get_score(self, key: str, member: str) -> Optional[float]:
        """Return the member's score, or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def range(
        self,
        key: str,
        start: int,
        stop: int,
        descending: bool = False,
    ) -> List[Tuple[str, float]]:
        """
        Ranked read by position, scores included.

        ``stop`` is inclusive and negative indexes count from the end,
        so ``range(key, 0, -1)`` returns everything. Members with equal
        scores are ordered by member name (reversed when descending).
        """
        raise NotImplementedError

    @abstractmethod
    def range_by_score(
        self,
        key: str,
        minimum: float,
        maximum: float,
    ) -> List[Tuple[str, float]]:
        """Ascending read of members whose score lies in [minimum, maximum]."""
        raise NotImplementedError

    @abstractmethod
    def remove_member(self, key: str, member: str) -> bool:
        """Remove ``member`` from an ordered collection. True if it existed."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    @abstractmethod
    def add_member(self, key: str, member: str) -> bool:
        """Idempotent set add. True if the member was new."""
        raise NotImplementedError

    @abstractmethod
    def discard_member(self, key: str, member: str) -> bool:
        """Set removal. True if the member was present."""
        raise NotImplementedError

    @abstractmethod
    def members(self, key: str) -> Set[str]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Expiring Values
    # ------------------------------------------------------------------

    @abstractmethod
    def set_with_ttl(self, key: str, seconds: int, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def ttl(self, key: str) -> int:
        """
        Remaining lifetime of ``key`` in whole seconds.

        Returns -2 when the key does not exist and -1 when it exists
        without an expiry.
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Keyspace
    # ------------------------------------------------------------------

    @abstractmethod
    def delete(self, *keys: str) -> int:
        """Delete whole keys of any kind. Returns how many existed."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Optional Lifecycle Hooks
    # ------------------------------------------------------------------

    def health(self) -> bool:
        """
        Return the backend's health status.
        Default implementation assumes healthy.
        """
        return True

    def shutdown(self) -> None:
        """Release connections. Default is a no-op."""
        pass
