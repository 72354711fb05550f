"""
Resonance Field — Interference Calculator

Scores alignment between an external agent's state and the field.
Harmonic coupling only engages once alignment is already above 0.8,
modelling resonance lock-in.
"""

from . import config as cfg
from .errors import require_finite
from .types import AgentState, FieldState, InterferencePattern, Phase, clamp


def score(agent_state: AgentState, field_state: FieldState) -> InterferencePattern:
    agent_c = clamp(require_finite("agent coherence", agent_state.coherence))
    agent_d = clamp(require_finite("agent dissonance", agent_state.dissonance))

    alignment = clamp(1 - abs(agent_c - field_state.coherence))
    interference = clamp(abs(agent_d - field_state.dissonance))

    if alignment > cfg.COUPLING_ENGAGE_ALIGNMENT:
        coupling = clamp(alignment * (1 - interference))
    else:
        coupling = 0.0

    if coupling > cfg.RESONANT_COUPLING:
        phase = Phase.RESONANT
    elif interference > cfg.DISSONANT_INTERFERENCE:
        phase = Phase.DISSONANT
    else:
        phase = Phase.NEUTRAL

    return InterferencePattern(
        alignment_score=alignment,
        interference_score=interference,
        harmonic_coupling=coupling,
        phase=phase,
    )
