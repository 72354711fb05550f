"""
Resonance Field — Symbolic Signature Tracker

Maintains a bounded map from symbol to {strength, trend, last_update}.

Observed symbols are blended 0.8 old / 0.2 new; absent symbols decay by
x0.98 per update. Entries that fall below the prune threshold are
deleted, never kept at zero.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional, Tuple

from . import config as cfg
from .bounded import BoundedMap
from .errors import require_finite
from .types import (
    SymbolicMarker,
    SymbolicShift,
    SymbolicStateEntry,
    SymbolicTrends,
    Trend,
    clamp,
)

log = logging.getLogger("resonance.signature")


class SymbolicSignatureTracker:
    """
    Decaying symbol-strength map.

    ``update`` is the only mutating operation besides ``seed``; it returns
    the entries whose trend is not stable, strongest first.
    """

    def __init__(
        self,
        retain_weight: float = cfg.SIGNATURE_RETAIN_WEIGHT,
        observe_weight: float = cfg.SIGNATURE_OBSERVE_WEIGHT,
        decay_factor: float = cfg.SIGNATURE_DECAY_FACTOR,
        prune_threshold: float = cfg.SIGNATURE_PRUNE_THRESHOLD,
        max_symbols: int = cfg.SIGNATURE_MAX_SYMBOLS,
        clock: Callable[[], float] = time.time,
    ):
        self.retain_weight = retain_weight
        self.observe_weight = observe_weight
        self.decay_factor = decay_factor
        self.prune_threshold = prune_threshold
        self._clock = clock
        self._entries: BoundedMap[str, SymbolicStateEntry] = BoundedMap(
            max_symbols, on_evict=self._log_eviction,
        )

    @staticmethod
    def _log_eviction(symbol: str, entry: SymbolicStateEntry) -> None:
        log.info(f"Signature full, evicted '{symbol}' (strength={entry.strength:.3f})")

    def seed(self, symbols: Iterable[str], strength: float = cfg.BASE_SYMBOL_STRENGTH) -> None:
        """Install base symbols that are not tracked yet, with a stable trend."""
        now = self._clock()
        strength = clamp(require_finite("strength", strength))
        for symbol in symbols:
            if symbol not in self._entries:
                self._entries.set(symbol, SymbolicStateEntry(strength, Trend.STABLE, now))

    def update(self, markers: Iterable[SymbolicMarker]) -> List[SymbolicShift]:
        markers = [
            SymbolicMarker(m.symbol, clamp(require_finite(f"strength[{m.symbol}]", m.strength)))
            for m in markers
        ]
        now = self._clock()
        observed = set()

        for marker in markers:
            observed.add(marker.symbol)
            current = self._entries.get(marker.symbol)

            if current is None:
                self._entries.set(
                    marker.symbol,
                    SymbolicStateEntry(marker.strength, Trend.EMERGING, now),
                )
                continue

            blended = (
                current.strength * self.retain_weight
                + marker.strength * self.observe_weight
            )
            if blended > current.strength:
                trend = Trend.INCREASING
            elif blended < current.strength:
                trend = Trend.DECREASING
            else:
                trend = Trend.STABLE
            self._entries.set(marker.symbol, SymbolicStateEntry(blended, trend, now))

        # Decay symbols absent from this batch
        for symbol, entry in self._entries.items():
            if symbol in observed:
                continue
            decayed = entry.strength * self.decay_factor
            if decayed < self.prune_threshold:
                self._entries.delete(symbol)
                log.debug(f"Pruned '{symbol}' (strength={decayed:.4f})")
            else:
                self._entries.set(symbol, SymbolicStateEntry(decayed, Trend.DECREASING, now))

        return self.shifts()

    def shifts(self) -> List[SymbolicShift]:
        """Entries whose trend is not stable, strongest first."""
        shifts = [
            SymbolicShift(symbol, entry.strength, entry.trend)
            for symbol, entry in self._entries.items()
            if entry.trend != Trend.STABLE
        ]
        shifts.sort(key=lambda s: s.strength, reverse=True)
        return shifts

    def dominant_trend(self) -> SymbolicTrends:
        dominant: Optional[SymbolicMarker] = None
        max_strength = 0.0
        rising, falling = [], []

        for symbol, entry in self._entries.items():
            if entry.strength > max_strength:
                max_strength = entry.strength
                dominant = SymbolicMarker(symbol, entry.strength)
            if entry.trend == Trend.INCREASING:
                rising.append(SymbolicMarker(symbol, entry.strength))
            elif entry.trend == Trend.DECREASING:
                falling.append(SymbolicMarker(symbol, entry.strength))

        rising.sort(key=lambda m: m.strength, reverse=True)
        falling.sort(key=lambda m: m.strength, reverse=True)
        return SymbolicTrends(
            dominant=dominant,
            rising=rising,
            falling=falling,
            strength=max_strength,
        )

    def get(self, symbol: str) -> Optional[SymbolicStateEntry]:
        return self._entries.get(symbol)

    def entries(self) -> Tuple[Tuple[str, SymbolicStateEntry], ...]:
        return tuple(self._entries.items())

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._entries

    def __len__(self) -> int:
        return len(self._entries)
