"""
Pytest fixtures for karma engine tests.

Provides an in-memory backend with a controllable clock and engines
configured for the common scenarios.
"""

import pytest

from karma import KarmaConfig, KarmaEngine
from karma.models import User
from karma.store import MemoryBackend


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    """In-memory backend driven by the fake clock."""
    return MemoryBackend(clock=clock)


@pytest.fixture
def config():
    """No link threshold, 300s cooldown, decay off."""
    return KarmaConfig(link_karma_threshold=None, cooldown=300)


@pytest.fixture
def engine(backend, config, clock):
    return KarmaEngine(backend, config, clock=clock)


@pytest.fixture
def make_engine(backend, clock):
    """Build an engine on the shared backend with custom config values."""

    def _make(**overrides):
        return KarmaEngine(backend, KarmaConfig(**overrides), clock=clock)

    return _make


@pytest.fixture
def alice():
    return User(id="U1", name="alice")


@pytest.fixture
def bob():
    return User(id="U2", name="bob")
