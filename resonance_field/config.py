"""
Resonance Field — Configuration

Central config for all engine components.
Reads from environment with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


# ── Field state ───────────────────────────────────────────
INITIAL_COHERENCE = 1.0
INITIAL_DISSONANCE = 0.0

# ── Symbolic signature ────────────────────────────────────
# Blend constants carried over unchanged; they have no documented derivation.
SIGNATURE_RETAIN_WEIGHT = 0.8       # weight of the existing strength
SIGNATURE_OBSERVE_WEIGHT = 0.2      # weight of the new observation
SIGNATURE_DECAY_FACTOR = 0.98       # per-step decay for absent symbols
SIGNATURE_PRUNE_THRESHOLD = 0.05    # entries below this are deleted
SIGNATURE_MAX_SYMBOLS = 256
BASE_SYMBOLS = (
    "harmony", "clarity", "depth", "emergence",
    "connection", "autonomy", "transcendence",
)
BASE_SYMBOL_STRENGTH = 0.1

# ── Markers ───────────────────────────────────────────────
NEUTRAL_MARKER_SYMBOL = "neutral"
NEUTRAL_MARKER_STRENGTH = 0.3
INTENT_TYPE_MARKER_STRENGTH = 0.8

# ── Oscillatory buffer ────────────────────────────────────
BASE_FREQUENCY = float(os.environ.get("RF_BASE_FREQUENCY", "432"))
BUFFER_ACTIVATE_ABOVE = 0.5
BUFFER_DEACTIVATE_BELOW = 0.3
AMPLITUDE_FACTOR = 0.5
MAX_STABILIZATION_FACTOR = 0.8
HARMONIC_MAP_LIMIT = 20

# Buffer is evaluated when a single impact raises dissonance by more than
# STABILIZATION_TRIGGER_DELTA or the field sits above STABILIZATION_TRIGGER_LEVEL.
STABILIZATION_TRIGGER_DELTA = 0.3
STABILIZATION_TRIGGER_LEVEL = 0.6

# ── History & prediction ──────────────────────────────────
HISTORY_LIMIT = int(os.environ.get("RF_HISTORY_LIMIT", "100"))
PREDICTION_WINDOW = 5
PROJECTION_STEPS = 5
COHERENCE_THRESHOLD = 0.5

# ── Interference ──────────────────────────────────────────
COUPLING_ENGAGE_ALIGNMENT = 0.8
RESONANT_COUPLING = 0.7
DISSONANT_INTERFERENCE = 0.7

# ── Narrative context ─────────────────────────────────────
NARRATIVE_IMPACT_THRESHOLD = 0.2
NARRATIVE_LIMIT = 10
SNAPSHOT_NARRATIVE_ITEMS = 3

# ── Consumers ─────────────────────────────────────────────
HARM_THRESHOLD_DEFAULT = 0.6
HARM_THRESHOLD_MAX = 0.7
HARM_THRESHOLD_MIN = 0.5
HARM_RAISE_STEP = 0.01
HARM_LOWER_STEP = 0.02
HARM_RAISE_COHERENCE = 0.8
HARM_LOWER_DISSONANCE = 0.6

PERSONA_MAX_SHIFT = 20.0
PERSONA_MIN_SHIFT = 0.5
PERSONA_ADAPTATION_RATE = 0.05
PERSONA_FIELD_INTEGRATION = 0.5
PERSONA_TUNING_INTERVAL_S = 3600
EMOTIONAL_FREQUENCY_SHIFTS = {
    "resonant": 8,
    "harmonious": 4,
    "balanced": 0,
    "dissonant": -4,
    "chaotic": -8,
}

SECURITY_WATCH_DISSONANCE = 0.7
SECURITY_HIGH_DISSONANCE = 0.8
SECURITY_CRITICAL_DISSONANCE = 0.9
SECURITY_HISTORY_LIMIT = 50

# ── Memory store ──────────────────────────────────────────
MEMORY_STORE_LIMIT = 1000

# ── Logging ───────────────────────────────────────────────
LOG_DIR = Path(os.environ.get("RF_LOG_DIR", str(Path.home() / ".resonance" / "logs")))
LOG_LEVEL = os.environ.get("RF_LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES = 10_000_000
LOG_BACKUP_COUNT = 5


@dataclass(frozen=True)
class FieldSettings:
    """Per-engine copy of the tunable constants above."""
    initial_coherence: float = INITIAL_COHERENCE
    initial_dissonance: float = INITIAL_DISSONANCE
    retain_weight: float = SIGNATURE_RETAIN_WEIGHT
    observe_weight: float = SIGNATURE_OBSERVE_WEIGHT
    decay_factor: float = SIGNATURE_DECAY_FACTOR
    prune_threshold: float = SIGNATURE_PRUNE_THRESHOLD
    max_symbols: int = SIGNATURE_MAX_SYMBOLS
    base_symbols: Tuple[str, ...] = field(default=BASE_SYMBOLS)
    base_symbol_strength: float = BASE_SYMBOL_STRENGTH
    base_frequency: float = BASE_FREQUENCY
    activate_above: float = BUFFER_ACTIVATE_ABOVE
    deactivate_below: float = BUFFER_DEACTIVATE_BELOW
    harmonic_map_limit: int = HARMONIC_MAP_LIMIT
    trigger_delta: float = STABILIZATION_TRIGGER_DELTA
    trigger_level: float = STABILIZATION_TRIGGER_LEVEL
    history_limit: int = HISTORY_LIMIT
    prediction_window: int = PREDICTION_WINDOW
    projection_steps: int = PROJECTION_STEPS
    coherence_threshold: float = COHERENCE_THRESHOLD
    narrative_threshold: float = NARRATIVE_IMPACT_THRESHOLD
    narrative_limit: int = NARRATIVE_LIMIT
