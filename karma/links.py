from __future__ import annotations

from typing import List, Optional
import logging

from .models import LinkOutcome
from .store.base import KarmaBackend

logger = logging.getLogger(__name__)


class LinkGraph:
    """
    Bidirectional link relation between terms.

    Each term has two sets:
        links:<term>      terms this term points to
        linked_to:<term>  terms pointing at this term

    Invariant: B is in links(A) iff A is in linked_to(B). Score
    aggregation only reads the forward set; the reverse set lets a
    deleted term be unhooked from everything that points at it
    without scanning every term.
    """

    def __init__(self, backend: KarmaBackend, threshold: Optional[int] = None) -> None:
        self._backend = backend
        self._threshold = None if threshold is None else abs(threshold)

    @property
    def threshold(self) -> Optional[int]:
        return self._threshold

    @staticmethod
    def _links_key(term: str) -> str:
        return f"links:{term}"

    @staticmethod
    def _linked_to_key(term: str) -> str:
        return f"linked_to:{term}"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def link(self, source: str, target: str, source_score: int, target_score: int) -> LinkOutcome:
        """
        Link ``source`` to ``target`` if both own scores clear the threshold.

        Parameters
        ----------
        source_score, target_score : int
            Own scores (not totals) of the two terms.
        """
        if self._threshold is not None:
            if abs(source_score) < self._threshold or abs(target_score) < self._threshold:
                logger.info(
                    "[LINKS] Refused %s -> %s | threshold=%d | scores=(%d, %d)",
                    source, target, self._threshold, source_score, target_score,
                )
                return LinkOutcome(source, target, linked=False, threshold=self._threshold)

        created = self._backend.add_member(self._links_key(source), target)
        self._backend.add_member(self._linked_to_key(target), source)

        logger.info("[LINKS] Linked %s -> %s | created=%s", source, target, created)
        return LinkOutcome(source, target, linked=True, created=created)

    def unlink(self, source: str, target: str) -> bool:
        """True only if both directions of the link existed and were removed."""
        forward = self._backend.discard_member(self._links_key(source), target)
        reverse = self._backend.discard_member(self._linked_to_key(target), source)

        if forward or reverse:
            logger.info("[LINKS] Unlinked %s -> %s", source, target)

        return forward and reverse

    def delete_all_links_for(self, term: str) -> None:
        """
        Remove every link into and out of ``term``.

        Other terms' sets are cleaned before the term's own sets are
        dropped, so an interrupted delete can be repeated safely.
        """
        for other in self._backend.members(self._linked_to_key(term)):
            self._backend.discard_member(self._links_key(other), term)

        for other in self._backend.members(self._links_key(term)):
            self._backend.discard_member(self._linked_to_key(other), term)

        self._backend.delete(self._links_key(term), self._linked_to_key(term))
        logger.info("[LINKS] Cleared all links for %s", term)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def links_of(self, term: str) -> List[str]:
        return sorted(self._backend.members(self._links_key(term)))

    def linked_to(self, term: str) -> List[str]:
        return sorted(self._backend.members(self._linked_to_key(term)))
