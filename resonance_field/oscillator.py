"""
Resonance Field — Oscillatory Stabilization Buffer

Hysteretic on/off stabilizer:

  Inactive -> Active     when dissonance > 0.5
  Active   -> Inactive   when dissonance < 0.3
  0.3 <= dissonance <= 0.5 while active: stays active, parameters untouched

Every evaluation above the activation threshold recomputes the buffer:
frequency = base / (2 * dissonance), scaled by the harmonic modifier of
the dominant symbol; amplitude = dissonance / 2; stabilization factor =
min(0.8, dissonance * (1 + trend strength)); phase resets to 0.
"""

import logging
from typing import Optional

from . import config as cfg
from .bounded import BoundedMap
from .errors import require_finite
from .types import OscillatoryBufferState, SymbolicTrends, clamp

log = logging.getLogger("resonance.oscillator")


class OscillatoryBuffer:

    def __init__(
        self,
        base_frequency: float = cfg.BASE_FREQUENCY,
        activate_above: float = cfg.BUFFER_ACTIVATE_ABOVE,
        deactivate_below: float = cfg.BUFFER_DEACTIVATE_BELOW,
        harmonic_map_limit: int = cfg.HARMONIC_MAP_LIMIT,
    ):
        if deactivate_below > activate_above:
            raise ValueError("deactivate_below must not exceed activate_above")
        self.base_frequency = base_frequency
        self.activate_above = activate_above
        self.deactivate_below = deactivate_below

        self.active = False
        self.frequency = base_frequency
        self.amplitude = 0.0
        self.phase = 0.0
        self.stabilization_factor = 0.0
        self._harmonic_map: BoundedMap[str, float] = BoundedMap(harmonic_map_limit)

    def evaluate(self, dissonance: float, trends: Optional[SymbolicTrends] = None) -> bool:
        """
        Run one hysteresis step.

        Returns True when the dissonance is above the activation threshold
        (fresh activation or recompute while active), False otherwise.
        """
        dissonance = clamp(require_finite("dissonance", dissonance))

        if dissonance > self.activate_above:
            was_active = self.active
            self._recompute(dissonance, trends)
            if not was_active:
                log.info(
                    f"Stabilization buffer ON | dissonance={dissonance:.2f} "
                    f"| frequency={self.frequency:.1f} | factor={self.stabilization_factor:.2f}"
                )
            return True

        if self.active and dissonance < self.deactivate_below:
            self.active = False
            log.info(f"Stabilization buffer OFF | dissonance={dissonance:.2f}")

        return False

    def _recompute(self, dissonance: float, trends: Optional[SymbolicTrends]) -> None:
        self.active = True

        dominant = trends.dominant.symbol if trends and trends.dominant else None
        self.frequency = self.base_frequency / (dissonance * 2)
        if dominant is not None and dominant in self._harmonic_map:
            self.frequency *= self._harmonic_map[dominant]

        self.amplitude = dissonance * cfg.AMPLITUDE_FACTOR
        self.phase = 0.0

        trend_strength = trends.strength if trends else 0.0
        self.stabilization_factor = min(
            cfg.MAX_STABILIZATION_FACTOR, dissonance * (1 + trend_strength),
        )

    def update_harmonic_mapping(self, symbol: str, factor: float) -> None:
        """Insert or overwrite a modifier; the oldest-inserted entry goes first when full."""
        factor = require_finite("factor", factor)
        evicted = self._harmonic_map.set(symbol, factor)
        if evicted:
            log.debug(f"Harmonic map full, dropped '{evicted[0]}'")

    @property
    def harmonic_map(self) -> dict:
        return self._harmonic_map.to_dict()

    def state(self) -> OscillatoryBufferState:
        return OscillatoryBufferState(
            active=self.active,
            frequency=self.frequency,
            amplitude=self.amplitude,
            phase=self.phase,
            stabilization_factor=self.stabilization_factor,
            harmonic_map=tuple(self._harmonic_map.items()),
        )
