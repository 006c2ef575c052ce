from __future__ import annotations

from typing import Callable, List, Optional
import logging
import time

from .models import Action
from .store.base import KarmaBackend

logger = logging.getLogger(__name__)


class ActionLog:
    """
    Append-only record of accepted score changes.

    Entries are only written while decay is enabled. Aging and expiry
    belong to an external process; this class produces entries and
    offers a read-only listing for it.
    """

    KEY = "actions"

    def __init__(
        self,
        backend: KarmaBackend,
        enabled: bool,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._enabled = enabled
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._enabled

    def record(self, term: str, user_id: str, delta: int) -> Optional[Action]:
        if not self._enabled:
            return None

        action = Action(term=term, user_id=str(user_id), delta=delta, created_at=self._clock())
        self._backend.add_scored(self.KEY, action.to_json(), action.created_at)

        logger.debug("[ACTIONS] Recorded | term=%s | user=%s | delta=%+d", term, user_id, delta)
        return action

    def entries(self, until: Optional[float] = None) -> List[Action]:
        """Actions in creation order, optionally only those created at or before ``until``."""
        maximum = float("inf") if until is None else until
        rows = self._backend.range_by_score(self.KEY, float("-inf"), maximum)
        return [Action.from_json(member) for member, _ in rows]
