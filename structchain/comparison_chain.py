"""
ComparisonChain: three-way structural ordering for possibly cyclic graphs.

The chain sums per-field contributions into one signed integer. With
`normalize` on, each contribution is clamped to -1, 0 or +1 first, so no single
large delta can dominate the aggregate.

Rules:
    - None orders before any value; identical references tie.
    - Scalars and opaque values use their own < / >.
    - Primitive arrays compare lexicographically, then by length.
    - Reference arrays and loose containers register the pair and compare the
      shared prefix element by element (stopping at the first non-zero
      contribution), then by length.
    - Loose mappings compare their key arrays, then their value arrays.
    - Orderable participants use structural_compare().

Values that cannot be ordered against each other (a TypeError from the
ordering attempt) contribute zero. A zero result therefore does not imply
equality.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from structchain import config
from structchain.logs import get_logger
from structchain.protocols import Orderable
from structchain.registry import SeenMap, Slot
from structchain.traversal import (
    SEQUENCE_SHAPES,
    Shape,
    classify,
    elements,
    materialize,
    native_compare,
    sign,
    split_mapping,
)

logger = get_logger(__name__)


def _compare_or_zero(a: Any, b: Any) -> int:
    try:
        return native_compare(a, b)
    except TypeError:
        logger.debug("unorderable pair %s / %s treated as tied", type(a).__name__, type(b).__name__)
        return 0


def _compare_primitive_arrays(a: Any, b: Any) -> int:
    xs = elements(a)
    ys = elements(b)
    for x, y in zip(xs, ys):
        c = _compare_or_zero(x, y)
        if c != 0:
            return c
    return sign(len(xs) - len(ys))


class ComparisonChain:
    """
    Builder for a structural three-way comparison.

    Usage:
        return ComparisonChain(seen).next(self.rank, other.rank).next(self.name, other.name).finish()
    """

    def __init__(
        self,
        seen: Optional[SeenMap] = None,
        loose_collections: Optional[bool] = None,
        normalize: Optional[bool] = None,
    ) -> None:
        self.seen = seen if seen is not None else SeenMap()
        self.loose_collections = config.resolve_loose(loose_collections)
        self.normalize = config.resolve_normalize(normalize)
        self._result = 0
        self._registered: List[Slot] = []

    @property
    def result(self) -> int:
        """The running sum, before deferred slots are folded."""
        return self._result

    def include(self, value: int) -> "ComparisonChain":
        """Add one contribution (clamped to -1/0/1 in normalize mode)."""
        self._result += sign(value) if self.normalize else value
        return self

    def next(self, a: Any, b: Any) -> "ComparisonChain":
        """Compare one pair of field values."""
        if a is b:
            return self.include(0)
        if a is None:
            return self.include(-1)
        if b is None:
            return self.include(1)
        # Ordered pair only; (b, a) is a separate comparison
        if self.seen.is_paired(a, b):
            logger.debug(
                "comparison cycle edge %s@%x / %s@%x",
                type(a).__name__, id(a), type(b).__name__, id(b),
            )
            return self

        shape_a = classify(a, Orderable, self.loose_collections)
        shape_b = classify(b, Orderable, self.loose_collections)

        if shape_a is Shape.PRIMITIVE_ARRAY and shape_b is Shape.PRIMITIVE_ARRAY:
            return self.include(_compare_primitive_arrays(a, b))
        if shape_a in SEQUENCE_SHAPES and shape_b in SEQUENCE_SHAPES:
            slot = self._register(a, b)
            with self.seen.descend(a):
                slot.value = self._deep_compare(materialize(a), materialize(b))
            return self
        if shape_a is Shape.MAPPING and shape_b is Shape.MAPPING:
            slot = self._register(a, b)
            with self.seen.descend(a):
                slot.value = self._deep_compare_mapping(a, b)
            return self
        if shape_a is Shape.PARTICIPANT and shape_b is Shape.PARTICIPANT:
            slot = self._register(a, b)
            with self.seen.descend(a):
                try:
                    slot.value = int(a.structural_compare(b, self.seen))
                except TypeError:
                    logger.debug("%s.structural_compare raised TypeError; treated as tied", type(a).__name__)
                    slot.value = 0
            return self
        return self.include(_compare_or_zero(a, b))

    def _register(self, a: Any, b: Any) -> Slot:
        slot = self.seen.register_pair(a, b)
        self._registered.append(slot)
        return slot

    def _sub(self) -> "ComparisonChain":
        return ComparisonChain(self.seen, self.loose_collections, self.normalize)

    def _deep_compare(self, xs: Sequence[Any], ys: Sequence[Any]) -> int:
        sub = self._sub()
        for x, y in zip(xs, ys):
            sub.next(x, y)
            if sub.finish() != 0:
                return sub.result
        return sub.include(len(xs) - len(ys)).finish()

    def _deep_compare_mapping(self, a: Any, b: Any) -> int:
        keys_a, values_a = split_mapping(a)
        keys_b, values_b = split_mapping(b)
        sub = self._sub()
        sub.next(keys_a, keys_b)
        if sub.finish() != 0:
            return sub.result
        return sub.next(values_a, values_b).finish()

    def finish(self) -> int:
        """Fold every resolved deferred slot and return the result."""
        for slot in self._registered:
            if slot.resolved:
                self.include(slot.value)
        self._registered = []
        return self._result

    def __repr__(self) -> str:
        return f"ComparisonChain(result={self._result}, normalize={self.normalize})"
