from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any, Dict, List, Tuple
import logging

from .models import LinkOutcome, Message, ModifyResult

if TYPE_CHECKING:
    from .engine import KarmaEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringSnapshot:
    """
    Immutable view of a term's scores at one point in time.

    Link scores are the linked terms' *own* scores: aggregation is one
    hop deep, a linked term's own links never count.
    """

    own_score: int
    link_scores: Tuple[Tuple[str, int], ...] = ()

    @property
    def total_score(self) -> int:
        return self.own_score + sum(score for _, score in self.link_scores)

    def links_with_scores(self) -> Dict[str, int]:
        return dict(self.link_scores)

    def links_with_non_zero_scores(self) -> Dict[str, int]:
        return {name: score for name, score in self.link_scores if score != 0}


@dataclass(frozen=True)
class Term:
    """
    A scorable term and the operations on it.

    Terms are cheap, short-lived values built per request through
    ``KarmaEngine.term``. Equality and hashing use the normalized name
    only, so terms work as dict keys and set members.

    Reads are cached for the lifetime of the instance. Mutations made
    through the instance drop the cache so the next read sees a fresh
    snapshot; changes made elsewhere are not picked up.
    """

    name: str
    engine: "KarmaEngine" = field(compare=False, repr=False)

    def __str__(self) -> str:
        return self.name

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    @cached_property
    def own_score(self) -> int:
        return self.engine.scores.score(self.name)

    @cached_property
    def linked_terms(self) -> Dict[str, "Term"]:
        """Linked terms keyed by name, each built once per instance."""
        return {
            name: Term(name, self.engine)
            for name in self.engine.link_graph.links_of(self.name)
        }

    @property
    def links(self) -> List[str]:
        return list(self.linked_terms)

    @cached_property
    def snapshot(self) -> ScoringSnapshot:
        return ScoringSnapshot(
            own_score=self.own_score,
            link_scores=tuple(
                (name, linked.own_score) for name, linked in self.linked_terms.items()
            ),
        )

    @property
    def total_score(self) -> int:
        return self.snapshot.total_score

    def links_with_scores(self) -> Dict[str, int]:
        return self.snapshot.links_with_scores()

    def links_with_non_zero_scores(self) -> Dict[str, int]:
        return self.snapshot.links_with_non_zero_scores()

    def _refresh(self) -> None:
        # frozen dataclass: cached values live in the instance __dict__
        for name in ("own_score", "linked_terms", "snapshot"):
            self.__dict__.pop(name, None)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def check(self, show_all: bool = True) -> str:
        """
        Summary line, e.g. ``"foo: 3 (1), linked to: bar: 2"``.

        With ``show_all=False`` links whose own score is zero are left out.
        """
        snapshot = self.snapshot
        text = f"{self.name}: {snapshot.total_score}"

        scores = snapshot.links_with_scores() if show_all else snapshot.links_with_non_zero_scores()

        if scores:
            link_text = ", ".join(f"{name}: {score}" for name, score in scores.items())
            text += f" ({snapshot.own_score}), {self.engine.translate('linked_to')}: {link_text}"

        return text

    # ------------------------------------------------------------------
    # Modification
    # ------------------------------------------------------------------

    def increment(self, user) -> ModifyResult:
        return self.modify(user, 1)

    def decrement(self, user) -> ModifyResult:
        return self.modify(user, -1)

    def modify(self, user, delta: int) -> ModifyResult:
        """
        Apply ``delta`` on behalf of ``user`` unless they are cooling down.

        A cooling-down user gets a "cooling_down" message with the
        seconds left; nothing is written and the request is not queued.
        """
        user_id = str(user.id)
        ttl = self.engine.cooldown.remaining(user_id, self.name)

        if ttl > 0:
            logger.info("[TERM] Cooling down | user=%s | term=%s | ttl=%d", user_id, self.name, ttl)
            return ModifyResult(
                term=self.name,
                applied=False,
                ttl=ttl,
                message=Message("cooling_down", {"term": self.name, "ttl": ttl, "count": ttl}),
            )

        config = self.engine.config

        score = self.engine.scores.increment(self.name, delta)
        self.engine.scores.record_modification(self.name, user_id)
        if config.cooldown:
            self.engine.cooldown.arm(user_id, self.name, config.cooldown)
        self.engine.actions.record(self.name, user_id, delta)

        self._refresh()
        # seed the fresh cache with the score the increment returned
        self.__dict__["own_score"] = score
        return ModifyResult(
            term=self.name,
            applied=True,
            score=score,
            text=self.check(show_all=False),
        )

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def link(self, other: "Term") -> LinkOutcome:
        outcome = self.engine.link_graph.link(
            self.name, other.name, self.own_score, other.own_score
        )
        if outcome.linked:
            self._refresh()
        return outcome

    def unlink(self, other: "Term") -> bool:
        removed = self.engine.link_graph.unlink(self.name, other.name)
        self._refresh()
        return removed

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete(self) -> None:
        """
        Forget the term: score, modification counts and all links.

        Deleting an unknown term is a no-op. Cooldowns and logged
        actions are left to expire on their own.
        """
        self.engine.scores.remove(self.name)
        self.engine.scores.clear_modifications(self.name)
        self.engine.link_graph.delete_all_links_for(self.name)

        self._refresh()
        logger.info("[TERM] Deleted %s", self.name)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def modified(self) -> List[Tuple[Any, int]]:
        """(user, count) pairs, most frequent modifier first."""
        return [
            (self.engine.find_user(user_id), count)
            for user_id, count in self.engine.scores.modifications(self.name)
        ]
