from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional
import os


THIRTY_DAYS = 30 * 24 * 60 * 60


def default_term_normalizer(term: str) -> str:
    return str(term).strip().lower()


def _is_int(value) -> bool:
    # bool is an int subclass; True must not pass as a 1 second cooldown
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class KarmaConfig:
    """
    Central configuration object for the karma engine.

    Passed explicitly into KarmaEngine; nothing in the package reads
    ambient configuration on its own.

    Attributes
    ----------
    link_karma_threshold : Optional[int]
        Minimum absolute own score both terms need before they can be
        linked. None disables the gate.

    decay : bool
        Whether score changes are written to the action log.

    decay_interval : int
        Decay window in seconds. The action log is only written when
        decay is on and this is positive.

    cooldown : Optional[int]
        Seconds a user must wait before modifying the same term again.
        None or 0 disables rate limiting.

    term_normalizer : Callable[[str], str]
        Maps raw input to the canonical term name.

    namespace : str
        Key prefix used by store backends that share a keyspace.
    """

    link_karma_threshold: Optional[int] = 10
    decay: bool = False
    decay_interval: int = THIRTY_DAYS
    cooldown: Optional[int] = 300
    term_normalizer: Callable[[str], str] = default_term_normalizer
    namespace: str = "karma"

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if self.link_karma_threshold is not None and not _is_int(self.link_karma_threshold):
            raise ValueError(
                f"link_karma_threshold must be an integer or None: {self.link_karma_threshold!r}"
            )

        if not _is_int(self.decay_interval) or self.decay_interval < 0:
            raise ValueError(f"decay_interval must be a non-negative integer: {self.decay_interval!r}")

        if self.cooldown is not None and (not _is_int(self.cooldown) or self.cooldown < 0):
            raise ValueError(f"cooldown must be a non-negative integer or None: {self.cooldown!r}")

        if not callable(self.term_normalizer):
            raise ValueError("term_normalizer must be callable")

        if not self.namespace or not isinstance(self.namespace, str):
            raise ValueError("namespace must be a non-empty string")

    @property
    def decay_enabled(self) -> bool:
        return bool(self.decay) and self.decay_interval > 0

    def normalize(self, term: str) -> str:
        return self.term_normalizer(term)


# ----------------------------------------------------------------------
# Environment Loading
# ----------------------------------------------------------------------

_DISABLED = {"", "none", "null", "off"}


def _optional_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    if raw.strip().lower() in _DISABLED:
        return None
    return int(raw)


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def load_config() -> KarmaConfig:
    """Build a KarmaConfig from KARMA_* environment variables."""
    return KarmaConfig(
        link_karma_threshold=_optional_int("KARMA_LINK_THRESHOLD", 10),
        decay=_flag("KARMA_DECAY", False),
        decay_interval=int(os.environ.get("KARMA_DECAY_INTERVAL", str(THIRTY_DAYS))),
        cooldown=_optional_int("KARMA_COOLDOWN", 300),
        namespace=os.environ.get("KARMA_NAMESPACE", "karma"),
    )


def redis_url() -> str:
    return os.environ.get("KARMA_REDIS_URL", "redis://localhost:6379/0")
