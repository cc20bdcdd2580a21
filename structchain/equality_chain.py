"""
EqualityChain: structural equality for possibly cyclic object graphs.

The chain holds a running boolean, AND-ing in every field comparison; one
False fixes the result for the rest of the run. start(a, b) checks the root
pair and may short-circuit the whole chain (`skipped`), after which every
next() is a no-op.

Compound pairs are registered in the shared SeenMap under the identity pair
(a, b) before descending. If a pair is met again, in either direction, the
comparison is skipped: the cyclic edge is treated as satisfied and adds nothing,
while every non-cyclic field still has to match. This makes

    A.next = B, B.next = A   (other fields equal)  ->  A == B
    A -> B -> C -> A         (other fields equal)  ->  all pairs equal

finish() ANDs in every resolved Slot this chain registered.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from structchain import config
from structchain.logs import get_logger
from structchain.protocols import Equalable
from structchain.registry import SeenMap, Slot
from structchain.traversal import (
    SEQUENCE_SHAPES,
    Shape,
    classify,
    elements,
    float_bits,
    is_bool,
    materialize,
    split_mapping,
)

logger = get_logger(__name__)


def _scalar_kind(value: Any) -> type:
    if is_bool(value):
        return bool
    if isinstance(value, float):
        return float
    return int


def _scalars_equal(a: Any, b: Any) -> bool:
    # True == 1 == 1.0 in Python; structurally they are three different values
    if _scalar_kind(a) is not _scalar_kind(b):
        return False
    if isinstance(a, float):
        # Bitwise, like the hash: nan equals nan, 0.0 differs from -0.0
        return float_bits(a) == float_bits(b)
    return a == b


class EqualityChain:
    """
    Builder for a structural equality check.

    Usage:
        return EqualityChain(seen).start(self, other).safe_compare(
            lambda c: c.next(self.name, other.name).next(self.children, other.children)
        )
    """

    def __init__(self, seen: Optional[SeenMap] = None, loose_collections: Optional[bool] = None) -> None:
        self.seen = seen if seen is not None else SeenMap()
        self.loose_collections = config.resolve_loose(loose_collections)
        self.a: Any = None
        self.b: Any = None
        self._result = True
        self._skip = False
        self._registered: List[Slot] = []

    @property
    def result(self) -> bool:
        return self._result

    @property
    def skipped(self) -> bool:
        """True once start() decided the outcome without field comparisons."""
        return self._skip

    @property
    def _active(self) -> bool:
        return self._result and not self._skip

    def start(self, a: Any, b: Any) -> "EqualityChain":
        """
        Record the root pair and short-circuit trivial cases.

        Identical references are equal; None against a value, or a b that is
        not an instance of type(a), is unequal.
        """
        self.a = a
        self.b = b
        if a is b:
            self._result = True
            self._skip = True
        elif a is None or b is None or not isinstance(b, type(a)):
            self._result = False
            self._skip = True
        return self

    def safe_compare(self, action: Callable[["EqualityChain"], Any]) -> bool:
        """Run action(self) unless the chain is already decided; return finish()."""
        if self._active:
            action(self)
        return self.finish()

    def include(self, value: bool) -> "EqualityChain":
        self._result = self._result and bool(value)
        return self

    def include_base(self, a: Equalable, b: Any, layer: Optional[type] = None) -> "EqualityChain":
        """AND in the equality of a's base layer against b."""
        if self._active:
            self.include(a.base_equals(b, self.seen, layer))
        return self

    def _is_cycle_edge(self, a: Any, b: Any) -> bool:
        return self.seen.is_paired(a, b) or self.seen.is_paired(b, a)

    def next(self, a: Any, b: Any) -> "EqualityChain":
        """Compare one pair of field values."""
        if not self._active:
            return self
        if self._is_cycle_edge(a, b):
            logger.debug(
                "equality cycle edge %s@%x / %s@%x",
                type(a).__name__, id(a), type(b).__name__, id(b),
            )
            return self
        if a is b:
            return self.include(True)
        if a is None or b is None:
            return self.include(False)

        shape_a = classify(a, Equalable, self.loose_collections)
        shape_b = classify(b, Equalable, self.loose_collections)

        if shape_a is Shape.SCALAR and shape_b is Shape.SCALAR:
            return self.include(_scalars_equal(a, b))
        if shape_a is Shape.PRIMITIVE_ARRAY and shape_b is Shape.PRIMITIVE_ARRAY:
            return self.include(self._primitive_arrays_equal(a, b))
        if shape_a in SEQUENCE_SHAPES and shape_b in SEQUENCE_SHAPES:
            slot = self._register(a, b)
            with self.seen.descend(a):
                slot.value = self._deep_equals(materialize(a), materialize(b))
            return self
        if shape_a is Shape.MAPPING and shape_b is Shape.MAPPING:
            slot = self._register(a, b)
            with self.seen.descend(a):
                slot.value = self._deep_equals_mapping(a, b)
            return self
        if shape_a is Shape.PARTICIPANT and shape_b is Shape.PARTICIPANT:
            slot = self._register(a, b)
            with self.seen.descend(a):
                slot.value = bool(a.structural_equals(b, self.seen))
            return self
        return self.include(a == b)

    def _register(self, a: Any, b: Any) -> Slot:
        slot = self.seen.register_pair(a, b)
        self._registered.append(slot)
        return slot

    @staticmethod
    def _primitive_arrays_equal(a: Any, b: Any) -> bool:
        xs = elements(a)
        ys = elements(b)
        if len(xs) != len(ys):
            return False
        return all(_scalars_equal(x, y) for x, y in zip(xs, ys))

    def _deep_equals(self, xs: Sequence[Any], ys: Sequence[Any]) -> bool:
        if len(xs) != len(ys):
            return False
        sub = EqualityChain(self.seen, self.loose_collections)
        for x, y in zip(xs, ys):
            sub.next(x, y)
        return sub.finish()

    def _deep_equals_mapping(self, a: Any, b: Any) -> bool:
        if len(a) != len(b):
            return False
        keys_a, values_a = split_mapping(a)
        keys_b, values_b = split_mapping(b)
        sub = EqualityChain(self.seen, self.loose_collections)
        sub.next(keys_a, keys_b).next(values_a, values_b)
        return sub.finish()

    def finish(self) -> bool:
        """AND in every resolved deferred slot and return the result."""
        for slot in self._registered:
            if slot.resolved:
                self.include(slot.value)
        self._registered = []
        return self._result

    def __bool__(self) -> bool:
        return self._result

    def __repr__(self) -> str:
        return f"EqualityChain(result={self._result}, skipped={self._skip})"
