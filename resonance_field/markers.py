"""
Resonance Field — Marker Extraction

Keyword-pattern extractor for symbolic markers. Each pattern that
matches the intent text contributes one marker; the intent type itself
is always added as a marker. With nothing to go on, the extractor emits
a single neutral marker so the tracker still has a signal to decay toward.
"""

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from . import config as cfg
from .collaborators import MarkerExtractor
from .types import SymbolicMarker


DEFAULT_PATTERNS: Sequence[Tuple[str, str, float]] = (
    (r"(help|assist|support)", "assistance", 0.7),
    (r"(create|build|make|develop)", "creation", 0.8),
    (r"(analyze|examine|assess)", "analysis", 0.9),
    (r"(learn|understand|know)", "knowledge", 0.75),
    (r"(feel|emotion|sense)", "emotion", 0.6),
    (r"(connect|relate|share)", "connection", 0.65),
)


def neutral_marker() -> SymbolicMarker:
    return SymbolicMarker(cfg.NEUTRAL_MARKER_SYMBOL, cfg.NEUTRAL_MARKER_STRENGTH)


class PatternMarkerExtractor(MarkerExtractor):

    def __init__(
        self,
        patterns: Sequence[Tuple[str, str, float]] = DEFAULT_PATTERNS,
        type_strength: float = cfg.INTENT_TYPE_MARKER_STRENGTH,
    ):
        self._patterns: List[Tuple[Pattern, str, float]] = [
            (re.compile(p, re.IGNORECASE), symbol, strength)
            for p, symbol, strength in patterns
        ]
        self.type_strength = type_strength

    def extract(
        self,
        text: Optional[str],
        intent_type: Optional[str] = None,
    ) -> List[SymbolicMarker]:
        markers = []

        if text:
            for pattern, symbol, strength in self._patterns:
                if pattern.search(text):
                    markers.append(SymbolicMarker(symbol, strength))

        if intent_type:
            markers.append(SymbolicMarker(intent_type.lower(), self.type_strength))

        if not markers:
            markers.append(neutral_marker())

        return markers
