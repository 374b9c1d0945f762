"""
Pytest Configuration and Fixtures.

This module provides shared fixtures for the algokit test suite: a
deterministic nanosecond clock, a scripted memory probe and trackers that
do not leak state between tests.
"""

import pytest

from algokit.performance.tracker import OperationMetricsTracker, reset_tracker


class FakeClock:
    """Nanosecond clock that only moves when told to."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, nanoseconds: float) -> None:
        self.now += int(nanoseconds)


class FakeMemoryProbe:
    """Memory probe whose reading is set by the test."""

    def __init__(self, start: int = 0):
        self.current = start

    def __call__(self) -> int:
        return self.current

    def allocate(self, nbytes: int) -> None:
        self.current += nbytes


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_memory():
    return FakeMemoryProbe()


@pytest.fixture
def tracker(fake_clock, fake_memory):
    """Tracker driven by the fake clock and memory probe."""
    return OperationMetricsTracker(memory_probe=fake_memory, timer=fake_clock)


@pytest.fixture(autouse=True)
def fresh_shared_tracker():
    """Discard the process-wide tracker around every test."""
    reset_tracker()
    yield
    reset_tracker()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every ALGOKIT_* variable from the environment."""
    import os
    for key in list(os.environ):
        if key.startswith('ALGOKIT_'):
            monkeypatch.delenv(key)
    return monkeypatch
