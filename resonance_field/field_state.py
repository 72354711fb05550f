"""
Resonance Field — Field State

Holds the scalar coherence/dissonance pair and applies impact deltas.
Both values are clamped into [0, 1] after every mutation; non-finite
deltas are rejected before anything changes.
"""

import logging

from .errors import require_finite
from .types import FieldImpact, FieldState, clamp

log = logging.getLogger("resonance.field_state")


class FieldStateHolder:

    def __init__(self, coherence: float = 1.0, dissonance: float = 0.0):
        self._initial = FieldState(
            coherence=clamp(require_finite("coherence", coherence)),
            dissonance=clamp(require_finite("dissonance", dissonance)),
        )
        self._state = self._initial

    @property
    def state(self) -> FieldState:
        return self._state

    def apply_impact(self, delta: FieldImpact) -> FieldState:
        """Add the deltas, clamp each value, and return the new state."""
        coherence_delta = require_finite("coherence_delta", delta.coherence_delta)
        dissonance_delta = require_finite("dissonance_delta", delta.dissonance_delta)

        previous = self._state
        self._state = FieldState(
            coherence=clamp(previous.coherence + coherence_delta),
            dissonance=clamp(previous.dissonance + dissonance_delta),
        )
        log.debug(
            "Impact applied: coherence %.3f -> %.3f, dissonance %.3f -> %.3f",
            previous.coherence, self._state.coherence,
            previous.dissonance, self._state.dissonance,
        )
        return self._state

    def reset(self) -> FieldState:
        self._state = self._initial
        return self._state
