"""
HashChain: structural hash codes for possibly cyclic object graphs.

The chain holds one running 32-bit integer, seeded at 1, and folds every
included value with

    acc' = 31 * acc + v        (wrapped to signed 32 bits)

Scalars fold their bit pattern directly. Compound values (reference arrays,
loose containers and mappings, Hashable participants) are registered in the
shared SeenMap the first time they are met; their deep hash is computed once
into a Slot. Meeting the same identity again records the Slot as an
"additional" revisit instead of descending, so a cycle terminates.

finish() folds, in order:
    1. every Slot this chain registered (registration order)
    2. every revisit Slot this chain recorded

Results are run-local: opaque values fold their own hash(), which for str and
bytes-like keys is randomized per process.
"""

from __future__ import annotations

from typing import Any, List, Optional

from structchain import config
from structchain.logs import get_logger
from structchain.protocols import Hashable
from structchain.registry import SeenMap, Slot
from structchain.traversal import (
    SEQUENCE_SHAPES,
    Shape,
    classify,
    elements,
    fold_int,
    fold_scalar,
    int32,
    materialize,
    split_mapping,
)

logger = get_logger(__name__)

HASH_SEED = 1
HASH_MULTIPLIER = 31


class HashChain:
    """
    Builder for a structural hash code.

    Usage:
        HashChain(seen).next(self.name).next(self.children).finish()
    """

    def __init__(self, seen: Optional[SeenMap] = None, loose_collections: Optional[bool] = None) -> None:
        self.seen = seen if seen is not None else SeenMap()
        self.loose_collections = config.resolve_loose(loose_collections)
        self._hash = HASH_SEED
        self._registered: List[Slot] = []
        self._additional: List[Slot] = []

    @property
    def result(self) -> int:
        """The running hash, before deferred slots are folded."""
        return self._hash

    def include(self, value: int) -> "HashChain":
        """Fold a raw 32-bit contribution."""
        self._hash = int32(HASH_MULTIPLIER * self._hash + int32(value))
        return self

    def include_base(self, target: Hashable, layer: Optional[type] = None) -> "HashChain":
        """Fold the hash of target's base layer."""
        return self.include(fold_int(target.base_hash(self.seen, layer)))

    def next(self, value: Any) -> "HashChain":
        """Fold one value, dispatching on its shape."""
        shape = classify(value, Hashable, self.loose_collections)

        if shape is Shape.NULL:
            return self.include(0)
        if shape is Shape.SCALAR:
            return self.include(fold_scalar(value))
        if shape is Shape.PRIMITIVE_ARRAY:
            for v in elements(value):
                self.include(fold_scalar(v))
            return self
        if shape is Shape.OPAQUE:
            return self.include(fold_int(hash(value)))

        # Compound: registered once per run, revisits reuse the slot
        slot = self.seen.get(value)
        if slot is not None:
            logger.debug("hash revisit of %s@%x", type(value).__name__, id(value))
            self._additional.append(slot)
            return self

        slot = self.seen.register(value, initial=0)
        self._registered.append(slot)
        with self.seen.descend(value):
            slot.value = self._deep_hash(value, shape)
        return self

    def _deep_hash(self, value: Any, shape: Shape) -> int:
        if shape is Shape.PARTICIPANT:
            return fold_int(value.structural_hash(self.seen))

        sub = HashChain(self.seen, self.loose_collections)
        if shape in SEQUENCE_SHAPES:
            for v in materialize(value):
                sub.next(v)
        else:
            keys, values = split_mapping(value)
            sub.next(keys).next(values)
        return sub.finish()

    def finish(self) -> int:
        """Fold the deferred slots and return the hash."""
        for slot in self._registered:
            self.include(slot.value or 0)
        for slot in self._additional:
            self.include(slot.value or 0)
        self._registered = []
        self._additional = []
        return self._hash

    def __repr__(self) -> str:
        return f"HashChain(result={self._hash})"
