"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import pytest

# Ensure backend root is on path when running pytest from repo root or backend
backend = Path(__file__).resolve().parent.parent
if str(backend) not in sys.path:
    sys.path.insert(0, str(backend))

from routepulse.monitoring.store import MetricsStore  # noqa: E402


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 1_000_000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MetricsStore(clock=clock)
