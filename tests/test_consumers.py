"""
Tests for resonance_field.consumers

Covers:
- Harm threshold adaptation and its bounds
- Persona frequency shift, bounds and rate limiting
- Security dissonance bands and forced stabilization
- Consumers wired to a live engine through subscribe()
"""

from unittest.mock import MagicMock

import pytest

from resonance_field.consumers import (
    EthicsThresholdAdapter,
    PersonaSelfTuner,
    SecurityMonitor,
)
from resonance_field.types import FieldImpact, Intent


class TestEthicsThresholdAdapter:

    def test_raises_on_high_coherence(self, make_snapshot):
        adapter = EthicsThresholdAdapter()
        assert adapter.observe(make_snapshot(0.9, 0.1)) == pytest.approx(0.61)

    def test_raise_capped(self, make_snapshot):
        adapter = EthicsThresholdAdapter()
        for _ in range(50):
            adapter.observe(make_snapshot(0.95, 0.0))
        assert adapter.harm_threshold == pytest.approx(0.7)

    def test_lowers_on_high_dissonance(self, make_snapshot):
        adapter = EthicsThresholdAdapter()
        assert adapter.observe(make_snapshot(0.5, 0.7)) == pytest.approx(0.58)
        for _ in range(50):
            adapter.observe(make_snapshot(0.5, 0.7))
        assert adapter.harm_threshold == pytest.approx(0.5)

    def test_neutral_field_leaves_threshold(self, make_snapshot):
        adapter = EthicsThresholdAdapter()
        assert adapter.observe(make_snapshot(0.6, 0.3)) == 0.6


class TestPersonaSelfTuner:

    def test_shift_from_coherence_ratio(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(base_frequency=432, adaptation_rate=0.3, clock=clock)
        record = tuner.observe(make_snapshot(1.0, 0.0))
        # ratio 10 -> (0 + 36) * 0.5 = 18, adapted by 0.3
        assert record.coherence_ratio == pytest.approx(10.0)
        assert record.shift == pytest.approx(5.4)
        assert tuner.frequency == pytest.approx(437.4)
        assert tuner.tuning_shift == pytest.approx(5.4)

    def test_default_adaptation_rate(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(base_frequency=432, clock=clock)
        record = tuner.observe(make_snapshot(1.0, 0.0))
        assert tuner.adaptation_rate == 0.05
        assert record.shift == pytest.approx(0.9)
        assert tuner.frequency == pytest.approx(432.9)

    def test_rate_limited(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(clock=clock, min_interval_s=3600)
        tuner.observe(make_snapshot(1.0, 0.0))
        clock.advance(60)
        assert tuner.observe(make_snapshot(1.0, 0.0)) is None
        clock.advance(3600)
        assert tuner.observe(make_snapshot(1.0, 0.0)) is not None
        assert len(tuner.shifts) == 2

    def test_bounded_around_base(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(base_frequency=432, adaptation_rate=0.3, clock=clock, min_interval_s=0)
        for _ in range(20):
            tuner.observe(make_snapshot(1.0, 0.0))
        assert tuner.frequency == pytest.approx(452)

    def test_small_shift_ignored(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(clock=clock)
        # ratio 1 -> shift 0
        assert tuner.observe(make_snapshot(0.6, 0.5)) is None
        assert tuner.frequency == tuner.base_frequency

    def test_dissonant_state_lowers_frequency(self, make_snapshot, clock):
        tuner = PersonaSelfTuner(base_frequency=432, emotional_state="chaotic", clock=clock)
        record = tuner.observe(make_snapshot(0.2, 0.9))
        assert record.shift < 0


class TestSecurityMonitor:

    @pytest.mark.parametrize("dissonance, action", [
        (0.5, None),
        (0.7, None),
        (0.75, "continue_monitoring"),
        (0.85, "increase_monitoring"),
        (0.95, "initiate_dissonance_scrubbing"),
    ])
    def test_bands(self, dissonance, action):
        assessment = SecurityMonitor().check(dissonance)
        assert assessment.recommended_action == action
        assert assessment.security_implications is (action is not None)

    def test_critical_forces_stabilization(self):
        stabilize = MagicMock(return_value=True)
        monitor = SecurityMonitor(stabilize=stabilize)
        assessment = monitor.check(0.95)
        stabilize.assert_called_once_with(0.95)
        assert assessment.stabilization_forced is True
        assert monitor.escalation_count == 1

    def test_history_bounded(self):
        monitor = SecurityMonitor(history_limit=3)
        for d in (0.1, 0.2, 0.3, 0.4):
            monitor.check(d)
        assert list(monitor.dissonance_history) == [0.2, 0.3, 0.4]


class TestEngineWiring:

    @pytest.mark.asyncio
    async def test_consumers_follow_engine(self, engine):
        ethics = EthicsThresholdAdapter()
        security = SecurityMonitor(stabilize=engine.activate_oscillatory_buffer)
        engine.subscribe(ethics.observe)
        engine.subscribe(security.observe)

        await engine.process_intent(Intent(type="q"), FieldImpact(-0.5, 0.2))
        assert security.escalation_count == 0

        # Steps below the delta trigger still push dissonance past the critical band
        for _ in range(3):
            await engine.process_intent(Intent(type="q"), FieldImpact(0.0, 0.25))

        assert engine.field_state.dissonance > 0.9
        assert security.escalation_count >= 1
        assert engine.snapshot().oscillatory_state.active is True
        assert ethics.harm_threshold < 0.6
