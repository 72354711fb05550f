"""
Tests for resonance_field.history, resonance_field.predictor and
resonance_field.interference

Covers:
- FIFO history bound
- Insufficient-data prediction
- Linear decay extrapolation on a declining series
- Rising series never reports decay
- Interference scoring and phase classification
"""

import math

import pytest

from resonance_field.errors import InvalidDelta
from resonance_field.history import ResonanceHistoryLog
from resonance_field.interference import score
from resonance_field.predictor import DecayPredictor
from resonance_field.types import (
    AgentState,
    FieldState,
    Phase,
    ResonanceHistoryEntry,
)


def entry(n: int, coherence: float = 0.5) -> ResonanceHistoryEntry:
    return ResonanceHistoryEntry(
        timestamp=float(n),
        intent_signature=f"intent:{n}",
        coherence_impact=0.0,
        dissonance_impact=0.0,
        field_state=FieldState(coherence=coherence, dissonance=0.0),
    )


def history_of(samples) -> ResonanceHistoryLog:
    log = ResonanceHistoryLog()
    for i, c in enumerate(samples):
        log.record(entry(i, c))
    return log


class TestResonanceHistoryLog:

    def test_bounded_fifo(self):
        """150 records keep exactly the last 100, in order."""
        log = ResonanceHistoryLog(limit=100)
        for i in range(150):
            log.record(entry(i))
        assert len(log) == 100
        assert [e.intent_signature for e in log.entries()] == [f"intent:{i}" for i in range(50, 150)]

    def test_recent_and_samples(self):
        log = history_of([0.1, 0.2, 0.3])
        assert [e.intent_signature for e in log.recent(2)] == ["intent:1", "intent:2"]
        assert log.coherence_samples(5) == [0.1, 0.2, 0.3]
        assert log.recent(0) == []

    def test_clear(self):
        log = history_of([0.1])
        log.clear()
        assert len(log) == 0

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            ResonanceHistoryLog(limit=0)


class TestDecayPredictor:

    def test_insufficient_history(self):
        prediction = DecayPredictor().predict(history_of([0.9, 0.8, 0.7, 0.6]), 0.6)
        assert prediction.decay_rate == 0
        assert prediction.time_to_threshold == math.inf
        assert prediction.projected_coherence == 0.6

    def test_empty_history(self):
        prediction = DecayPredictor().predict(ResonanceHistoryLog(), 0.75)
        assert prediction.projected_coherence == 0.75
        assert math.isinf(prediction.time_to_threshold)

    def test_monotonic_decline(self):
        prediction = DecayPredictor().predict_from_samples([0.9, 0.85, 0.8, 0.75, 0.7], 0.7)
        assert prediction.decay_rate == pytest.approx(0.05)
        assert math.isfinite(prediction.time_to_threshold)
        assert prediction.time_to_threshold == pytest.approx(4.0)
        assert prediction.projected_coherence == pytest.approx(0.45)

    def test_uses_last_window_only(self):
        samples = [0.1, 0.1, 0.9, 0.85, 0.8, 0.75, 0.7]
        prediction = DecayPredictor().predict(history_of(samples))
        assert prediction.decay_rate == pytest.approx(0.05)

    def test_rising_trend_has_no_decay(self):
        prediction = DecayPredictor().predict_from_samples([0.5, 0.6, 0.7, 0.8, 0.9], 0.9)
        assert prediction.decay_rate == 0
        assert prediction.time_to_threshold == math.inf
        assert prediction.projected_coherence == 1.0

    def test_below_threshold_reports_zero_time(self):
        prediction = DecayPredictor().predict_from_samples([0.6, 0.5, 0.4, 0.3, 0.2], 0.2)
        assert prediction.decay_rate == pytest.approx(0.1)
        assert prediction.time_to_threshold == 0.0
        assert prediction.projected_coherence == 0.0

    def test_window_must_allow_velocity(self):
        with pytest.raises(ValueError):
            DecayPredictor(window=1)


class TestInterference:

    def test_identical_states_resonate(self):
        pattern = score(AgentState(0.9, 0.1), FieldState(0.9, 0.1))
        assert pattern.alignment_score == 1.0
        assert pattern.interference_score == 0.0
        assert pattern.harmonic_coupling == 1.0
        assert pattern.phase == Phase.RESONANT
        assert pattern.phase == "resonant"

    def test_low_alignment_disengages_coupling(self):
        pattern = score(AgentState(0.3, 0.2), FieldState(0.9, 0.2))
        assert pattern.alignment_score == pytest.approx(0.4)
        assert pattern.harmonic_coupling == 0.0
        assert pattern.phase == Phase.NEUTRAL

    def test_dissonant_phase(self):
        pattern = score(AgentState(0.9, 0.9), FieldState(0.9, 0.1))
        assert pattern.interference_score == pytest.approx(0.8)
        assert pattern.harmonic_coupling == pytest.approx(0.2)
        assert pattern.phase == Phase.DISSONANT

    def test_out_of_range_agent_is_clamped(self):
        pattern = score(AgentState(1.7, -0.5), FieldState(1.0, 0.0))
        assert pattern.alignment_score == 1.0
        assert pattern.interference_score == 0.0

    def test_non_finite_agent_rejected(self):
        with pytest.raises(InvalidDelta):
            score(AgentState(float("nan"), 0.0), FieldState(1.0, 0.0))
