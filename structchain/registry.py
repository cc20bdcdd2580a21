"""
Identity Registry for structchain runs.

A run visits compound values (arrays, containers, mappings, participants) and
records each one here the first time it is seen. Keys are object identities:
two entries collide only when they are the very same instance. The registered
objects' own __eq__/__hash__ are never consulted, since those are usually the
thing being computed.

Each entry owns a Slot, a result cell that is written once the entry's deep
result is known and folded into the aggregate when an accumulator finishes.

Two kinds of key:
    - single identity (hash runs):           id(obj)
    - ordered identity pair (eq/cmp runs):   (id(a), id(b))

Keying pairs on both sides keeps the number of possible entries finite for any
pair of graphs, so pairwise traversal always terminates, even when the two
sides have cycles of different lengths.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple, Union

from structchain import config

_Key = Union[int, Tuple[int, int]]


@dataclass
class Slot:
    """Deferred result cell. None means unresolved."""
    value: Any = None

    @property
    def resolved(self) -> bool:
        return self.value is not None


@dataclass
class _Entry:
    obj: Any
    partner: Any
    slot: Slot


class _DepthTracked:
    """Nesting depth shared by every chain of one run."""

    depth = 0

    @contextmanager
    def descend(self, value: Any) -> Iterator[None]:
        """Enter one nesting level below value; raise ValueError past config.MAX_DEPTH."""
        if self.depth >= config.MAX_DEPTH:
            raise ValueError(
                f"{type(value).__name__} nested deeper than {config.MAX_DEPTH} levels "
                f"(STRUCTCHAIN_MAX_DEPTH)"
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


class SeenMap(_DepthTracked):
    """
    Identity-keyed map of visited values to their deferred Slots.

    Used by the hash, equality and comparison accumulators. Entries hold
    strong references to the registered objects so their id() stays unique
    for the lifetime of the run.
    """

    def __init__(self) -> None:
        self._entries: dict[_Key, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        """Registered left-hand objects, in registration order."""
        return (e.obj for e in self._entries.values())

    def __contains__(self, obj: Any) -> bool:
        """True if obj is registered as a single identity."""
        return id(obj) in self._entries

    # ---------- single identity ----------

    def register(self, obj: Any, initial: Any = None) -> Slot:
        """Register obj and return its fresh Slot."""
        slot = Slot(initial)
        self._entries[id(obj)] = _Entry(obj, None, slot)
        return slot

    def get(self, obj: Any) -> Optional[Slot]:
        entry = self._entries.get(id(obj))
        return entry.slot if entry is not None else None

    # ---------- identity pairs ----------

    def register_pair(self, a: Any, b: Any, initial: Any = None) -> Slot:
        """Register a paired against b and return the pair's fresh Slot."""
        slot = Slot(initial)
        self._entries[(id(a), id(b))] = _Entry(a, b, slot)
        return slot

    def get_pair(self, a: Any, b: Any) -> Optional[Slot]:
        entry = self._entries.get((id(a), id(b)))
        return entry.slot if entry is not None else None

    def is_paired(self, a: Any, b: Any) -> bool:
        """True iff a is registered against exactly b (by identity)."""
        return (id(a), id(b)) in self._entries

    def partners_of(self, obj: Any) -> List[Any]:
        """Every counterpart obj has been paired with, in registration order."""
        return [
            e.partner for key, e in self._entries.items()
            if isinstance(key, tuple) and e.obj is obj
        ]

    def slots(self) -> List[Slot]:
        """All slots in registration order."""
        return [e.slot for e in self._entries.values()]

    def __repr__(self) -> str:
        return f"SeenMap(size={len(self)})"


class SeenList(_DepthTracked):
    """
    Identity-keyed list of values already rendered by a StringChain.

    Order of first sight is kept for display; membership is by identity only.
    """

    def __init__(self) -> None:
        self._order: List[Any] = []
        self._ids: set[int] = set()

    def add(self, obj: Any) -> None:
        if id(obj) in self._ids:
            return
        self._ids.add(id(obj))
        self._order.append(obj)

    def __contains__(self, obj: Any) -> bool:
        return id(obj) in self._ids

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._order)

    def __repr__(self) -> str:
        return f"SeenList(size={len(self)})"
