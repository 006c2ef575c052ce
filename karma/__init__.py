"""
Karma scoring engine.

Keeps a score per term, rate-limits changes per user, links terms so
their scores add up, and logs changes for an external decay process.
"""

from .config import KarmaConfig, load_config
from .engine import KarmaEngine
from .scores import Direction
from .term import ScoringSnapshot, Term

__all__ = [
    "Direction",
    "KarmaConfig",
    "KarmaEngine",
    "ScoringSnapshot",
    "Term",
    "load_config",
]
