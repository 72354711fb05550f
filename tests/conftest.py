"""Shared fixtures for resonance field tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from resonance_field.engine import FieldEngine
from resonance_field.types import (
    DecayPrediction,
    FieldSnapshot,
    OscillatoryBufferState,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as async")


class FakeClock:
    """Manually advanced clock for deterministic timestamps."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return FieldEngine(clock=clock)


@pytest.fixture
def make_snapshot():
    """Factory for snapshots with only the scalar state filled in."""
    def _make(coherence: float, dissonance: float) -> FieldSnapshot:
        return FieldSnapshot(
            coherence=coherence,
            dissonance=dissonance,
            symbolic_signature=(),
            oscillatory_state=OscillatoryBufferState(
                active=False, frequency=432.0, amplitude=0.0,
                phase=0.0, stabilization_factor=0.0,
            ),
            decay_projection=DecayPrediction(coherence, 0.0, float("inf")),
        )
    return _make
