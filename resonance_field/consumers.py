"""
Resonance Field — Snapshot Consumers

Read-only subscribers that react to field snapshots:
  1. EthicsThresholdAdapter: raises/lowers a harm threshold
  2. PersonaSelfTuner: shifts a persona frequency by coherence ratio
  3. SecurityMonitor: escalates on dissonance bands, can force
     the stabilization buffer

Each exposes ``observe(snapshot)`` so it can be passed straight to
``FieldEngine.subscribe``.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from . import config as cfg
from .types import FieldSnapshot

log = logging.getLogger("resonance.consumers")


class EthicsThresholdAdapter:
    """Adjusts the harm threshold from field coherence and dissonance."""

    def __init__(self, harm_threshold: float = cfg.HARM_THRESHOLD_DEFAULT):
        self.harm_threshold = harm_threshold

    def observe(self, snapshot: FieldSnapshot) -> float:
        previous = self.harm_threshold

        # High coherence: tolerate a little more
        if snapshot.coherence > cfg.HARM_RAISE_COHERENCE:
            self.harm_threshold = min(cfg.HARM_THRESHOLD_MAX, self.harm_threshold + cfg.HARM_RAISE_STEP)

        # High dissonance: tighten
        if snapshot.dissonance > cfg.HARM_LOWER_DISSONANCE:
            self.harm_threshold = max(cfg.HARM_THRESHOLD_MIN, self.harm_threshold - cfg.HARM_LOWER_STEP)

        if self.harm_threshold != previous:
            log.debug(f"Harm threshold {previous:.2f} -> {self.harm_threshold:.2f}")
        return self.harm_threshold


@dataclass
class FrequencyShift:
    timestamp: float
    previous_frequency: float
    new_frequency: float
    shift: float
    coherence_ratio: float
    emotional_state: str


class PersonaSelfTuner:
    """
    Derives a persona frequency shift from the coherence/dissonance ratio.

    Tuning is rate limited: at most one applied shift per ``min_interval_s``.
    """

    def __init__(
        self,
        base_frequency: float = cfg.BASE_FREQUENCY,
        field_integration: float = cfg.PERSONA_FIELD_INTEGRATION,
        adaptation_rate: float = cfg.PERSONA_ADAPTATION_RATE,
        min_interval_s: float = cfg.PERSONA_TUNING_INTERVAL_S,
        emotional_state: str = "balanced",
        clock: Callable[[], float] = time.time,
    ):
        self.base_frequency = base_frequency
        self.frequency = base_frequency
        self.field_integration = field_integration
        self.adaptation_rate = adaptation_rate
        self.min_interval_s = min_interval_s
        self.emotional_state = emotional_state
        self.shifts: List[FrequencyShift] = []
        self._last_tuning: Optional[float] = None
        self._clock = clock

    def observe(self, snapshot: FieldSnapshot) -> Optional[FrequencyShift]:
        now = self._clock()
        if self._last_tuning is not None and now - self._last_tuning < self.min_interval_s:
            return None

        ratio = snapshot.coherence / (snapshot.dissonance + 0.1)
        base_shift = cfg.EMOTIONAL_FREQUENCY_SHIFTS.get(self.emotional_state, 0)
        shift = (base_shift + (ratio - 1) * 4) * self.field_integration

        if abs(shift) <= cfg.PERSONA_MIN_SHIFT:
            return None

        target = self.frequency + shift * self.adaptation_rate
        bounded = max(
            self.base_frequency - cfg.PERSONA_MAX_SHIFT,
            min(self.base_frequency + cfg.PERSONA_MAX_SHIFT, target),
        )
        record = FrequencyShift(
            timestamp=now,
            previous_frequency=self.frequency,
            new_frequency=bounded,
            shift=bounded - self.frequency,
            coherence_ratio=ratio,
            emotional_state=self.emotional_state,
        )
        self.shifts.append(record)
        self.frequency = bounded
        self._last_tuning = now
        log.info(f"Persona frequency {record.previous_frequency:.1f} -> {bounded:.1f} (ratio={ratio:.2f})")
        return record

    @property
    def tuning_shift(self) -> float:
        return self.frequency - self.base_frequency


@dataclass
class SecurityAssessment:
    current_dissonance: float
    security_implications: bool
    recommended_action: Optional[str]
    stabilization_forced: bool = False


class SecurityMonitor:
    """
    Escalates when dissonance crosses the 0.7 / 0.8 / 0.9 bands.

    Above the critical band it forces stabilization through the
    ``stabilize`` callback (normally ``FieldEngine.activate_oscillatory_buffer``).
    """

    def __init__(
        self,
        stabilize: Optional[Callable[[float], bool]] = None,
        history_limit: int = cfg.SECURITY_HISTORY_LIMIT,
    ):
        self._stabilize = stabilize
        self.dissonance_history: Deque[float] = deque(maxlen=history_limit)
        self._escalations = 0

    def observe(self, snapshot: FieldSnapshot) -> SecurityAssessment:
        return self.check(snapshot.dissonance)

    def check(self, dissonance: float) -> SecurityAssessment:
        self.dissonance_history.append(dissonance)

        if dissonance <= cfg.SECURITY_WATCH_DISSONANCE:
            return SecurityAssessment(dissonance, False, None)

        self._escalations += 1
        forced = False
        if dissonance > cfg.SECURITY_CRITICAL_DISSONANCE:
            action = "initiate_dissonance_scrubbing"
            if self._stabilize is not None:
                forced = self._stabilize(dissonance)
            log.warning(f"Critical dissonance {dissonance:.2f}, forced stabilization={forced}")
        elif dissonance > cfg.SECURITY_HIGH_DISSONANCE:
            action = "increase_monitoring"
            log.warning(f"High dissonance {dissonance:.2f}")
        else:
            action = "continue_monitoring"

        return SecurityAssessment(dissonance, True, action, stabilization_forced=forced)

    @property
    def escalation_count(self) -> int:
        return self._escalations
