from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LinkOutcome:
    """
    Result of a link request between two terms.

    A refused link is not an error: it means one of the terms did not
    reach the configured link threshold, and nothing was written.

    Attributes
    ----------
    source : str
        Term the link starts from.

    target : str
        Term being linked to.

    linked : bool
        True when both link sets now hold the pair.

    created : bool
        True when the forward link did not exist before this call.
        Re-linking an existing pair succeeds with created=False.

    threshold : Optional[int]
        Absolute threshold that was not satisfied, set only when refused.
    """

    source: str
    target: str
    linked: bool
    created: bool = False
    threshold: Optional[int] = None

    @property
    def refused(self) -> bool:
        return self.threshold is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "linked": self.linked,
            "created": self.created,
            "threshold": self.threshold,
        }
