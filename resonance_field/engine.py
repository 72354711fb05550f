"""
Resonance Field — Field Engine

Orchestrates one processed intent end to end:

  1. Resolve the impact (supplied by the caller or the ImpactCalculator)
  2. Validate, clamp and apply it to the field state
  3. Record a bounded history entry
  4. Update the symbolic signature from the intent's markers
  5. Evaluate the stabilization buffer when dissonance crosses a trigger
  6. Predict coherence decay from recent history
  7. Score interference against the caller's agent state, if given
  8. Hand the imprint to the memory store and notify listeners

The engine is owned by exactly one agent/session. It is not safe for
concurrent mutation; wrap it in LockedFieldEngine when it must be shared.
"""

import asyncio
import inspect
import logging
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Union

from . import config as cfg
from .config import FieldSettings
from .collaborators import ImpactCalculator, MarkerExtractor, MemoryStore, NullMemoryStore
from .errors import FieldEngineError, InvalidDelta, require_finite
from .field_state import FieldStateHolder
from .history import ResonanceHistoryLog
from .interference import score
from .markers import PatternMarkerExtractor
from .oscillator import OscillatoryBuffer
from .predictor import DecayPredictor
from .signature import SymbolicSignatureTracker
from .types import (
    AgentState,
    FieldImpact,
    FieldSnapshot,
    FieldState,
    Intent,
    InterferencePattern,
    NarrativeEntry,
    ProcessResult,
    ResonanceHistoryEntry,
    SymbolicMarker,
    clamp,
)

log = logging.getLogger("resonance.engine")

SnapshotListener = Callable[[FieldSnapshot], None]


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


def _as_impact(value: Union[FieldImpact, Mapping[str, Any]]) -> FieldImpact:
    if isinstance(value, FieldImpact):
        return value
    if isinstance(value, Mapping):
        try:
            return FieldImpact(
                coherence_delta=value["coherence_delta"],
                dissonance_delta=value["dissonance_delta"],
                intent_state=value.get("intent_state"),
            )
        except KeyError as e:
            raise InvalidDelta(f"impact is missing {e.args[0]!r}") from e
    raise InvalidDelta(f"unsupported impact type: {type(value).__name__}")


class FieldEngine:
    """
    Single-owner coherence field state machine.

    All collaborators are injected; with none supplied the engine needs an
    explicit impact on every call and extracts markers with the default
    keyword patterns.
    """

    def __init__(
        self,
        impact_calculator: Optional[ImpactCalculator] = None,
        marker_extractor: Optional[MarkerExtractor] = None,
        memory_store: Optional[MemoryStore] = None,
        settings: Optional[FieldSettings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = s = settings or FieldSettings()
        self._impact_calculator = impact_calculator
        self._marker_extractor = marker_extractor or PatternMarkerExtractor()
        self._memory_store = memory_store if memory_store is not None else NullMemoryStore()
        self._clock = clock

        self._state = FieldStateHolder(s.initial_coherence, s.initial_dissonance)
        self._tracker = SymbolicSignatureTracker(
            retain_weight=s.retain_weight,
            observe_weight=s.observe_weight,
            decay_factor=s.decay_factor,
            prune_threshold=s.prune_threshold,
            max_symbols=s.max_symbols,
            clock=clock,
        )
        self._buffer = OscillatoryBuffer(
            base_frequency=s.base_frequency,
            activate_above=s.activate_above,
            deactivate_below=s.deactivate_below,
            harmonic_map_limit=s.harmonic_map_limit,
        )
        self._history = ResonanceHistoryLog(s.history_limit)
        self._predictor = DecayPredictor(
            window=s.prediction_window,
            projection_steps=s.projection_steps,
            threshold=s.coherence_threshold,
        )
        self._narrative: Deque[NarrativeEntry] = deque(maxlen=s.narrative_limit)
        self._listeners: List[SnapshotListener] = []
        self._initialized = False
        self._processed = 0

    def initialize(self) -> "FieldEngine":
        """Seed the base symbols. Calling it again is a no-op."""
        if not self._initialized:
            self._tracker.seed(self.settings.base_symbols, self.settings.base_symbol_strength)
            self._initialized = True
            log.debug(f"Field initialized with {len(self._tracker)} base symbols")
        return self

    # -- Read-only views ------------------------------------------

    @property
    def field_state(self) -> FieldState:
        return self._state.state

    @property
    def history(self) -> List[ResonanceHistoryEntry]:
        return self._history.entries()

    @property
    def memory_store(self) -> MemoryStore:
        return self._memory_store

    @property
    def processed_count(self) -> int:
        return self._processed

    def snapshot(self) -> FieldSnapshot:
        state = self._state.state
        narrative = list(self._narrative)[-cfg.SNAPSHOT_NARRATIVE_ITEMS:]
        return FieldSnapshot(
            coherence=state.coherence,
            dissonance=state.dissonance,
            symbolic_signature=self._tracker.entries(),
            oscillatory_state=self._buffer.state(),
            decay_projection=self._predictor.predict(self._history, state.coherence),
            narrative_context=tuple(narrative),
        )

    # -- Mutation -------------------------------------------------

    async def process_intent(
        self,
        intent: Union[Intent, str],
        impact: Optional[Union[FieldImpact, Mapping[str, Any]]] = None,
        agent_state: Optional[AgentState] = None,
        ethical_state: Optional[Dict[str, Any]] = None,
    ) -> ProcessResult:
        """
        Run one intent through the field.

        Raises InvalidDelta (state untouched) for non-finite impact, marker
        or agent-state values. Failures of the impact calculator or memory
        store propagate unchanged; a store failure happens after the state
        update, and listeners still receive the new snapshot.
        """
        if isinstance(intent, str):
            intent = Intent(type="general", text=intent)

        if impact is None:
            if self._impact_calculator is None:
                raise FieldEngineError("no impact supplied and no ImpactCalculator configured")
            impact = await _resolve(
                self._impact_calculator.compute_impact(intent, ethical_state)
            )
        impact = _as_impact(impact)

        # Validate everything before the first mutation
        impact = FieldImpact(
            coherence_delta=require_finite("coherence_delta", impact.coherence_delta),
            dissonance_delta=require_finite("dissonance_delta", impact.dissonance_delta),
            intent_state=impact.intent_state,
        )
        markers = [
            SymbolicMarker(m.symbol, clamp(require_finite(f"strength[{m.symbol}]", m.strength)))
            for m in self._marker_extractor.extract(intent.text, intent.type)
        ]
        if agent_state is not None:
            require_finite("agent coherence", agent_state.coherence)
            require_finite("agent dissonance", agent_state.dissonance)

        now = self._clock()
        state = self._state.apply_impact(impact)

        entry = ResonanceHistoryEntry(
            timestamp=now,
            intent_signature=intent.signature,
            coherence_impact=impact.coherence_delta,
            dissonance_impact=impact.dissonance_delta,
            field_state=state,
            symbolic_markers=tuple(markers),
        )
        self._history.record(entry)

        shifts = self._tracker.update(markers)

        if self._needs_stabilization(impact, state):
            self._buffer.evaluate(state.dissonance, self._tracker.dominant_trend())

        prediction = self._predictor.predict(self._history, state.coherence)
        interference = score(agent_state, state) if agent_state is not None else None

        self._record_narrative(intent, impact, markers, now)
        self._processed += 1

        try:
            await _resolve(self._memory_store.store_imprint(entry))
        finally:
            self._notify()

        return ProcessResult(
            field_impact=impact,
            field_state=state,
            decay_prediction=prediction,
            symbolic_shift=shifts,
            interference=interference,
            oscillatory_state=self._buffer.state() if self._buffer.active else None,
        )

    def _needs_stabilization(self, impact: FieldImpact, state: FieldState) -> bool:
        # An active buffer is always re-evaluated so hysteresis can release it
        return (
            impact.dissonance_delta > self.settings.trigger_delta
            or state.dissonance > self.settings.trigger_level
            or self._buffer.active
        )

    def _record_narrative(
        self,
        intent: Intent,
        impact: FieldImpact,
        markers: List[SymbolicMarker],
        now: float,
    ) -> None:
        threshold = self.settings.narrative_threshold
        if abs(impact.coherence_delta) > threshold or abs(impact.dissonance_delta) > threshold:
            self._narrative.append(NarrativeEntry(
                timestamp=now,
                intent_type=intent.type,
                coherence_delta=impact.coherence_delta,
                dissonance_delta=impact.dissonance_delta,
                symbolic_markers=tuple(markers),
            ))

    # -- Manual controls ------------------------------------------

    def activate_oscillatory_buffer(self, dissonance_level: float) -> bool:
        return self._buffer.evaluate(dissonance_level, self._tracker.dominant_trend())

    def update_harmonic_mapping(self, symbol: str, factor: float) -> None:
        self._buffer.update_harmonic_mapping(symbol, factor)

    def score_interference(self, agent_state: AgentState) -> InterferencePattern:
        return score(agent_state, self._state.state)

    # -- Listeners ------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                log.exception(f"Snapshot listener {listener!r} failed")


class LockedFieldEngine:
    """
    Serializes access to an engine that is intentionally shared between
    tasks. Mutations and snapshot reads go through one asyncio.Lock.
    """

    def __init__(self, engine: FieldEngine):
        self._engine = engine
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> FieldEngine:
        return self._engine

    async def process_intent(self, intent, impact=None, agent_state=None, ethical_state=None) -> ProcessResult:
        async with self._lock:
            return await self._engine.process_intent(
                intent, impact, agent_state=agent_state, ethical_state=ethical_state,
            )

    async def snapshot(self) -> FieldSnapshot:
        async with self._lock:
            return self._engine.snapshot()

    async def activate_oscillatory_buffer(self, dissonance_level: float) -> bool:
        async with self._lock:
            return self._engine.activate_oscillatory_buffer(dissonance_level)

    async def update_harmonic_mapping(self, symbol: str, factor: float) -> None:
        async with self._lock:
            self._engine.update_harmonic_mapping(symbol, factor)
