"""
Capability interfaces injected into the field engine.

ImpactCalculator: turns an intent into a coherence/dissonance delta.
MarkerExtractor: pulls symbolic markers out of intent text.
MemoryStore: receives an imprint of every processed intent.

Calculators and stores may implement their methods as coroutines;
the engine awaits whatever comes back awaitable.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from . import config as cfg
from .types import FieldImpact, Intent, ResonanceHistoryEntry, SymbolicMarker


class ImpactCalculator(ABC):
    """Converts an intent into a field impact."""

    @abstractmethod
    def compute_impact(
        self,
        intent: Intent,
        ethical_state: Optional[Dict[str, Any]] = None,
    ) -> FieldImpact:
        """
        Compute the delta for ``intent``.
        May return a FieldImpact or an awaitable resolving to one.
        """
        ...


class MarkerExtractor(ABC):
    """Extracts symbolic markers from intent content."""

    @abstractmethod
    def extract(
        self,
        text: Optional[str],
        intent_type: Optional[str] = None,
    ) -> List[SymbolicMarker]:
        """
        Return markers for the intent.
        Must never return an empty list: no signal yields the neutral marker.
        """
        ...


class MemoryStore(ABC):
    """Audit trail for processed intents."""

    @abstractmethod
    def store_imprint(self, entry: ResonanceHistoryEntry) -> Any:
        """Persist ``entry``. May return an awaitable."""
        ...


# -- Defaults -------------------------------------------------------

class StaticImpactCalculator(ImpactCalculator):
    """Returns the same impact for every intent."""

    def __init__(self, coherence_delta: float = 0.05, dissonance_delta: float = -0.02):
        self._impact = FieldImpact(
            coherence_delta=coherence_delta,
            dissonance_delta=dissonance_delta,
            intent_state="neutral",
        )

    def compute_impact(self, intent, ethical_state=None) -> FieldImpact:
        return self._impact


class NullMemoryStore(MemoryStore):

    def store_imprint(self, entry: ResonanceHistoryEntry) -> None:
        return None


class InMemoryStore(MemoryStore):
    """Keeps the most recent imprints in a bounded deque."""

    def __init__(self, limit: int = cfg.MEMORY_STORE_LIMIT):
        self._imprints: Deque[ResonanceHistoryEntry] = deque(maxlen=limit)

    async def store_imprint(self, entry: ResonanceHistoryEntry) -> None:
        self._imprints.append(entry)

    def recent(self, count: int = 5) -> List[ResonanceHistoryEntry]:
        if count <= 0:
            return []
        return list(self._imprints)[-count:]

    def __len__(self) -> int:
        return len(self._imprints)
