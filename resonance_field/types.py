"""
Resonance Field — Types

Dataclasses shared by every engine component. Field values are plain
floats; every component clamps into the documented domain before
handing a value back.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Trend(str, Enum):
    """Direction of a symbol's strength since its last update"""
    INCREASING = 'increasing'
    DECREASING = 'decreasing'
    STABLE = 'stable'
    EMERGING = 'emerging'


class Phase(str, Enum):
    """Phase relationship between an agent and the field"""
    RESONANT = 'resonant'
    DISSONANT = 'dissonant'
    NEUTRAL = 'neutral'


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# =============================================================================
# FIELD STATE
# =============================================================================

@dataclass(frozen=True)
class FieldState:
    """Scalar field state; both values live in [0, 1]."""
    coherence: float
    dissonance: float


@dataclass(frozen=True)
class FieldImpact:
    """Coherence/dissonance delta produced by an impact calculator."""
    coherence_delta: float
    dissonance_delta: float
    intent_state: Optional[str] = None


@dataclass(frozen=True)
class AgentState:
    """Coherence/dissonance snapshot of an external agent."""
    coherence: float
    dissonance: float


@dataclass
class Intent:
    """An intent passed through the field."""
    type: str
    subtype: Optional[str] = None
    text: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def signature(self) -> str:
        return f"{self.type}:{self.subtype or 'general'}"


# =============================================================================
# SYMBOLIC STATE
# =============================================================================

@dataclass(frozen=True)
class SymbolicMarker:
    symbol: str
    strength: float


@dataclass(frozen=True)
class SymbolicStateEntry:
    strength: float
    trend: Trend
    last_update: float


@dataclass(frozen=True)
class SymbolicShift:
    symbol: str
    strength: float
    trend: Trend


@dataclass(frozen=True)
class SymbolicTrends:
    """Dominant symbol plus rising/falling partitions, strongest first."""
    dominant: Optional[SymbolicMarker]
    rising: List[SymbolicMarker]
    falling: List[SymbolicMarker]
    strength: float


# =============================================================================
# HISTORY & NARRATIVE
# =============================================================================

@dataclass(frozen=True)
class ResonanceHistoryEntry:
    timestamp: float
    intent_signature: str
    coherence_impact: float
    dissonance_impact: float
    field_state: FieldState
    symbolic_markers: Tuple[SymbolicMarker, ...] = ()


@dataclass(frozen=True)
class NarrativeEntry:
    """A significant impact kept for narrative context."""
    timestamp: float
    intent_type: str
    coherence_delta: float
    dissonance_delta: float
    symbolic_markers: Tuple[SymbolicMarker, ...] = ()


# =============================================================================
# DERIVED RESULTS
# =============================================================================

@dataclass(frozen=True)
class OscillatoryBufferState:
    active: bool
    frequency: float
    amplitude: float
    phase: float
    stabilization_factor: float
    harmonic_map: Tuple[Tuple[str, float], ...] = ()


@dataclass(frozen=True)
class DecayPrediction:
    projected_coherence: float
    decay_rate: float
    time_to_threshold: float


@dataclass(frozen=True)
class InterferencePattern:
    alignment_score: float
    interference_score: float
    harmonic_coupling: float
    phase: Phase


@dataclass(frozen=True)
class FieldSnapshot:
    """Read-only point-in-time view of all engine state."""
    coherence: float
    dissonance: float
    symbolic_signature: Tuple[Tuple[str, SymbolicStateEntry], ...]
    oscillatory_state: OscillatoryBufferState
    decay_projection: DecayPrediction
    narrative_context: Tuple[NarrativeEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; enums become their values."""
        data = asdict(self)
        data["symbolic_signature"] = {
            symbol: {
                "strength": entry.strength,
                "trend": entry.trend.value,
                "last_update": entry.last_update,
            }
            for symbol, entry in self.symbolic_signature
        }
        for item in data["narrative_context"]:
            item["symbolic_markers"] = list(item["symbolic_markers"])
        data["oscillatory_state"]["harmonic_map"] = dict(self.oscillatory_state.harmonic_map)
        return data


@dataclass(frozen=True)
class ProcessResult:
    """Composite result of one processed intent."""
    field_impact: FieldImpact
    field_state: FieldState
    decay_prediction: DecayPrediction
    symbolic_shift: List[SymbolicShift]
    interference: Optional[InterferencePattern] = None
    oscillatory_state: Optional[OscillatoryBufferState] = None
