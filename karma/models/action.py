from dataclasses import dataclass
from typing import Any, Dict
import json
import uuid


@dataclass(frozen=True)
class Action:
    """
    One accepted score change, kept for decay and reporting.

    Stored as a JSON member of the "actions" collection, scored by
    ``created_at`` (epoch seconds). ``id`` keeps otherwise identical
    actions from collapsing into a single member.
    """

    term: str
    user_id: str
    delta: int
    created_at: float
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", uuid.uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "term": self.term,
            "user_id": self.user_id,
            "delta": self.delta,
            "created_at": self.created_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, raw: str) -> "Action":
        data = json.loads(raw)
        return cls(
            term=data["term"],
            user_id=str(data["user_id"]),
            delta=int(data["delta"]),
            created_at=float(data["created_at"]),
            id=data.get("id", ""),
        )
