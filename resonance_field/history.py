"""Resonance Field — bounded FIFO log of processed impacts."""

from collections import deque
from typing import Deque, List

from . import config as cfg
from .types import ResonanceHistoryEntry


class ResonanceHistoryLog:

    def __init__(self, limit: int = cfg.HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._entries: Deque[ResonanceHistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen

    def record(self, entry: ResonanceHistoryEntry) -> None:
        self._entries.append(entry)

    def entries(self) -> List[ResonanceHistoryEntry]:
        return list(self._entries)

    def recent(self, n: int) -> List[ResonanceHistoryEntry]:
        if n <= 0:
            return []
        return list(self._entries)[-n:]

    def coherence_samples(self, n: int) -> List[float]:
        return [e.field_state.coherence for e in self.recent(n)]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
