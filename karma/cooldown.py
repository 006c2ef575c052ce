from __future__ import annotations

import logging

from .store.base import KarmaBackend

logger = logging.getLogger(__name__)


class CooldownGate:
    """
    Per (user, term) rate limit backed by expiring keys.

    The check in ``remaining`` and the write in ``arm`` are separate
    store calls, so two near-simultaneous requests from one user can
    both pass. Rate limiting here is best effort.
    """

    def __init__(self, backend: KarmaBackend) -> None:
        self._backend = backend

    @staticmethod
    def _key(user_id: str, term: str) -> str:
        return f"cooldown:{user_id}:{term}"

    def remaining(self, user_id: str, term: str) -> int:
        """Seconds left on the cooldown, 0 when none is active."""
        ttl = self._backend.ttl(self._key(user_id, term))
        return ttl if ttl > 0 else 0

    def arm(self, user_id: str, term: str, seconds) -> None:
        if not seconds:
            return

        self._backend.set_with_ttl(self._key(user_id, term), int(seconds), "1")
        logger.debug("[COOLDOWN] Armed | user=%s | term=%s | seconds=%d", user_id, term, seconds)
