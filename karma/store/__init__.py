"""
Backing stores for the karma engine.

KarmaBackend is the contract; RedisBackend is used in production and
MemoryBackend in tests and local runs.
"""

from .base import KarmaBackend
from .memory import MemoryBackend
from .redis_backend import RedisBackend

__all__ = ["KarmaBackend", "MemoryBackend", "RedisBackend"]
