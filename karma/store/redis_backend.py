from __future__ import annotations

from typing import List, Optional, Set, Tuple
import logging

import redis

from .base import KarmaBackend

logger = logging.getLogger(__name__)


def _bound(value: float):
    if value == float("inf"):
        return "+inf"
    if value == float("-inf"):
        return "-inf"
    return value


class RedisBackend(KarmaBackend):
    """
    Production backend on a Redis server.

    All keys are prefixed with ``<namespace>:`` so several engines (or
    other applications) can share one database. The client must be
    created with ``decode_responses=True``; ``from_url`` does this.

    Errors raised by redis-py (ConnectionError, TimeoutError,
    ResponseError) are not caught here.
    """

    def __init__(self, client: "redis.Redis", namespace: str = "karma") -> None:
        if not namespace:
            raise ValueError("RedisBackend requires a namespace.")

        self._client = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str = "karma", **kwargs) -> "RedisBackend":
        client = redis.Redis.from_url(url, decode_responses=True, **kwargs)
        logger.info("[REDIS] Client created | namespace=%s", namespace)
        return cls(client, namespace=namespace)

    @property
    def client(self) -> "redis.Redis":
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    # ------------------------------------------------------------------
    # Ordered Collections
    # ------------------------------------------------------------------

    def incr_score(self, key: str, member: str, amount: float) -> float:
        return float(self._client.zincrby(self._key(key), amount, member))

    def add_scored(self, key: str, member: str, score: float) -> None:
        self._client.zadd(self._key(key), {member: score})

    def get_score(self, key: str, member: str) -> Optional[float]:
        score = self._client.zscore(self._key(key), member)
        return None if score is None else float(score)

    def range(
        self,
        key: str,
        start: int,
        stop: int,
        descending: bool = False,
    ) -> List[Tuple[str, float]]:
        if descending:
            rows = self._client.zrevrange(self._key(key), start, stop, withscores=True)
        else:
            rows = self._client.zrange(self._key(key), start, stop, withscores=True)

        return [(member, float(score)) for member, score in rows]

    def range_by_score(
        self,
        key: str,
        minimum: float,
        maximum: float,
    ) -> List[Tuple[str, float]]:
        rows = self._client.zrangebyscore(
            self._key(key), _bound(minimum), _bound(maximum), withscores=True
        )
        return [(member, float(score)) for member, score in rows]

    def remove_member(self, key: str, member: str) -> bool:
        return self._client.zrem(self._key(key), member) > 0

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def add_member(self, key: str, member: str) -> bool:
        return self._client.sadd(self._key(key), member) > 0

    def discard_member(self, key: str, member: str) -> bool:
        return self._client.srem(self._key(key), member) > 0

    def members(self, key: str) -> Set[str]:
        return set(self._client.smembers(self._key(key)))

    # ------------------------------------------------------------------
    # Expiring Values
    # ------------------------------------------------------------------

    def set_with_ttl(self, key: str, seconds: int, value: str) -> None:
        self._client.set(self._key(key), value, ex=seconds)

    def ttl(self, key: str) -> int:
        return int(self._client.ttl(self._key(key)))

    # ------------------------------------------------------------------
    # Keyspace
    # ------------------------------------------------------------------

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._client.delete(*(self._key(k) for k in keys)))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def health(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError:
            logger.warning("[REDIS] Health check failed")
            return False

    def shutdown(self) -> None:
        self._client.close()
