"""
Resonance Field — Coherence field engine for agent interactions

Owns a bounded coherence/dissonance state that agents perturb, tracks a
decaying map of symbolic signal strengths, predicts trend-based decay,
stabilizes itself under sustained dissonance, and scores interference
between an agent and the field.

Usage:
    python3 -m resonance_field simulate     # Feed synthetic intents, print snapshot
    python3 -m resonance_field snapshot     # Print a fresh engine snapshot
"""

__version__ = "1.0.0"

from .engine import FieldEngine, LockedFieldEngine
from .errors import FieldEngineError, InvalidDelta
from .types import (
    AgentState,
    DecayPrediction,
    FieldImpact,
    FieldSnapshot,
    FieldState,
    Intent,
    InterferencePattern,
    Phase,
    ProcessResult,
    SymbolicMarker,
    Trend,
)
