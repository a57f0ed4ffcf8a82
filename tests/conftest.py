"""
Shared fixtures.

The engine never sleeps or starts threads; timed playback only moves
when tick() is called, so a settable clock is all a test needs.
"""

import pytest

from config import load_settings


class FakeClock:
    """Callable stand-in for time.monotonic."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return load_settings({"VISUALIZER_SECRET_KEY": "test-secret"})
