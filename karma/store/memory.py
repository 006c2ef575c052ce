from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set, Tuple
from threading import RLock
import math
import time

from .base import KarmaBackend


class MemoryBackend(KarmaBackend):
    """
    In-process backend with Redis-compatible semantics.

    Every operation holds a single re-entrant lock, so increments are
    atomic across threads sharing the instance. Nothing is persisted.

    Parameters
    ----------
    clock : Callable[[], float]
        Monotonic seconds source used for expiry. Tests inject a fake
        clock to move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._zsets: Dict[str, Dict[str, float]] = {}
        self._sets: Dict[str, Set[str]] = {}
        self._values: Dict[str, Tuple[str, Optional[float]]] = {}
        self._clock = clock
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Ordered Collections
    # ------------------------------------------------------------------

    def incr_score(self, key: str, member: str, amount: float) -> float:
        with self._lock:
            zset = self._zsets.setdefault(key, {})
            zset[member] = zset.get(member, 0.0) + float(amount)
            return zset[member]

    def add_scored(self, key: str, member: str, score: float) -> None:
        with self._lock:
            self._zsets.setdefault(key, {})[member] = float(score)

    def get_score(self, key: str, member: str) -> Optional[float]:
        with self._lock:
            return self._zsets.get(key, {}).get(member)

    def range(
        self,
        key: str,
        start: int,
        stop: int,
        descending: bool = False,
    ) -> List[Tuple[str, float]]:
        with self._lock:
            ordered = sorted(
                self._zsets.get(key, {}).items(),
                key=lambda item: (item[1], item[0]),
                reverse=descending,
            )

        size = len(ordered)
        if start < 0:
            start += size
        if stop < 0:
            stop += size
        start = max(start, 0)

        if start >= size or start > stop:
            return []

        return ordered[start:min(stop, size - 1) + 1]

    def range_by_score(
        self,
        key: str,
        minimum: float,
        maximum: float,
    ) -> List[Tuple[str, float]]:
        with self._lock:
            ordered = sorted(
                self._zsets.get(key, {}).items(),
                key=lambda item: (item[1], item[0]),
            )
        return [(m, s) for m, s in ordered if minimum <= s <= maximum]

    def remove_member(self, key: str, member: str) -> bool:
        with self._lock:
            zset = self._zsets.get(key)
            if zset is None or member not in zset:
                return False
            del zset[member]
            if not zset:
                del self._zsets[key]
            return True

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def add_member(self, key: str, member: str) -> bool:
        with self._lock:
            members = self._sets.setdefault(key, set())
            if member in members:
                return False
            members.add(member)
            return True

    def discard_member(self, key: str, member: str) -> bool:
        with self._lock:
            members = self._sets.get(key)
            if members is None or member not in members:
                return False
            members.discard(member)
            if not members:
                del self._sets[key]
            return True

    def members(self, key: str) -> Set[str]:
        with self._lock:
            return set(self._sets.get(key, ()))

    # ------------------------------------------------------------------
    # Expiring Values
    # ------------------------------------------------------------------

    def set_with_ttl(self, key: str, seconds: int, value: str) -> None:
        if seconds <= 0:
            raise ValueError(f"Expiry must be positive: {seconds}")

        with self._lock:
            self._values[key] = (value, self._clock() + seconds)

    def ttl(self, key: str) -> int:
        with self._lock:
            entry = self._live_value(key)
            if entry is None:
                return -2

            _, expires_at = entry
            if expires_at is None:
                return -1

            return math.ceil(expires_at - self._clock())

    def _live_value(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._values.get(key)
        if entry is None:
            return None

        _, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._values[key]
            return None

        return entry

    # ------------------------------------------------------------------
    # Keyspace
    # ------------------------------------------------------------------

    def delete(self, *keys: str) -> int:
        removed = 0

        with self._lock:
            for key in keys:
                existed = False
                if self._zsets.pop(key, None) is not None:
                    existed = True
                if self._sets.pop(key, None) is not None:
                    existed = True
                if self._live_value(key) is not None:
                    del self._values[key]
                    existed = True
                if existed:
                    removed += 1

        return removed
