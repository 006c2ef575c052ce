from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple
import logging
import time

from .actions import ActionLog
from .config import KarmaConfig
from .cooldown import CooldownGate
from .links import LinkGraph
from .messages import Translator, default_translator
from .scores import Direction, ScoreStore
from .store.base import KarmaBackend
from .store.redis_backend import RedisBackend
from .term import Term

logger = logging.getLogger(__name__)


def _identity(user_id: str) -> Any:
    return user_id


class KarmaEngine:
    """
    Application assembler for the karma core.

    This class wires together:
        Config
        Backend
        ScoreStore / LinkGraph / CooldownGate / ActionLog
        Host collaborators (user lookup, translator)

    and hands out Term values bound to them.
    """

    def __init__(
        self,
        backend: KarmaBackend,
        config: Optional[KarmaConfig] = None,
        *,
        find_user: Optional[Callable[[str], Any]] = None,
        translate: Optional[Translator] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or KarmaConfig()
        self.backend = backend

        self.scores = ScoreStore(backend)
        self.link_graph = LinkGraph(backend, self.config.link_karma_threshold)
        self.cooldown = CooldownGate(backend)
        self.actions = ActionLog(backend, enabled=self.config.decay_enabled, clock=clock)

        self.find_user = find_user or _identity
        self.translate = translate or default_translator

        logger.info(
            "[ENGINE] Ready | threshold=%s | cooldown=%s | decay=%s",
            self.config.link_karma_threshold,
            self.config.cooldown,
            self.actions.enabled,
        )

    @classmethod
    def create(
        cls,
        *,
        redis_url: str,
        config: Optional[KarmaConfig] = None,
        find_user: Optional[Callable[[str], Any]] = None,
        translate: Optional[Translator] = None,
    ) -> "KarmaEngine":
        config = config or KarmaConfig()
        backend = RedisBackend.from_url(redis_url, namespace=config.namespace)
        return cls(backend, config, find_user=find_user, translate=translate)

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def term(self, raw: str, normalize: bool = True) -> Term:
        name = self.config.normalize(raw) if normalize else raw
        return Term(name, self)

    # ------------------------------------------------------------------
    # Leaderboards
    # ------------------------------------------------------------------

    def best_terms(self, n: int = 5) -> List[Tuple[str, int]]:
        return self.scores.top_n(Direction.DESCENDING, n)

    def worst_terms(self, n: int = 5) -> List[Tuple[str, int]]:
        return self.scores.top_n(Direction.ASCENDING, n)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def health(self) -> bool:
        return self.backend.health()

    def shutdown(self) -> None:
        logger.info("[ENGINE] Shutting down")
        self.backend.shutdown()
