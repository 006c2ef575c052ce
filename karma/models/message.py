from dataclasses import dataclass, field
from typing import Any, Callable, Dict


@dataclass(frozen=True)
class Message:
    """
    Template key plus positional data for a user-facing message.

    The engine never builds final human-readable text for policy
    rejections; it hands the host a Message and the host's translator
    does substitution and pluralization.
    """

    key: str
    params: Dict[str, Any] = field(default_factory=dict)

    def render(self, translate: Callable[..., str]) -> str:
        return translate(self.key, **self.params)

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "params": dict(self.params)}
