from dataclasses import dataclass
from typing import Any, Dict, Optional

from .message import Message


@dataclass(frozen=True)
class ModifyResult:
    """
    Outcome of an increment or decrement request.

    Attributes
    ----------
    term : str
        Normalized term name.

    applied : bool
        False when the user is still cooling down on this term; the
        score was not touched in that case.

    score : Optional[int]
        Own score after the change. None when not applied.

    text : Optional[str]
        Confirmation summary (``Term.check(show_all=False)``) when applied.

    ttl : int
        Seconds left on the cooldown when not applied, else 0.

    message : Optional[Message]
        "cooling_down" message data when not applied.
    """

    term: str
    applied: bool
    score: Optional[int] = None
    text: Optional[str] = None
    ttl: int = 0
    message: Optional[Message] = None

    @property
    def cooling_down(self) -> bool:
        return not self.applied

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "applied": self.applied,
            "score": self.score,
            "text": self.text,
            "ttl": self.ttl,
            "message": self.message.to_dict() if self.message else None,
        }
