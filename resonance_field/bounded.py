"""
Resonance Field — Bounded Map

Fixed-capacity mapping with insertion-order eviction. Overwriting an
existing key keeps its original position; reads never reorder.
"""

import logging
from collections import OrderedDict
from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar

log = logging.getLogger("resonance.bounded")

K = TypeVar("K")
V = TypeVar("V")


class BoundedMap(Generic[K, V]):

    def __init__(
        self,
        capacity: int,
        on_evict: Optional[Callable[[K, V], None]] = None,
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._items: "OrderedDict[K, V]" = OrderedDict()
        self._on_evict = on_evict

    @property
    def capacity(self) -> int:
        return self._capacity

    def set(self, key: K, value: V) -> Optional[Tuple[K, V]]:
        """Insert or overwrite ``key``; returns the evicted pair, if any."""
        self._items[key] = value
        if len(self._items) <= self._capacity:
            return None

        evicted = self._items.popitem(last=False)
        log.debug("Evicted oldest key %r (capacity %d)", evicted[0], self._capacity)
        if self._on_evict is not None:
            self._on_evict(*evicted)
        return evicted

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        return self._items.get(key, default)

    def delete(self, key: K) -> None:
        del self._items[key]

    def clear(self) -> None:
        self._items.clear()

    def keys(self) -> List[K]:
        return list(self._items.keys())

    def items(self) -> List[Tuple[K, V]]:
        """Snapshot of the pairs, oldest-inserted first."""
        return list(self._items.items())

    def to_dict(self) -> dict:
        return dict(self._items)

    def __contains__(self, key) -> bool:
        return key in self._items

    def __getitem__(self, key: K) -> V:
        return self._items[key]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._items))
