"""
Shape dispatch shared by every structchain accumulator.

Given a value, classify() decides which handling rule applies. The order of
the checks is fixed:

    1. NULL             None
    2. SCALAR           bool, int, float
    3. PRIMITIVE_ARRAY  bytes, bytearray, memoryview, array.array
    4. REFERENCE_ARRAY  list, tuple
    5. CONTAINER        other Collections (loose mode only)
    6. MAPPING          Mappings (loose mode only)
    7. PARTICIPANT      instance of the capability being computed
    8. OPAQUE           anything else

A list/tuple/collection subclass that declares the capability is a
PARTICIPANT: the declaration takes precedence over rules 4-6.

The numeric helpers reproduce 32-bit hash folding: int32 wraps, long_bits
folds a 64-bit pattern to 32 bits, float_bits exposes the IEEE 754 pattern.
"""

from __future__ import annotations

import array
import collections.abc as cabc
import math
import struct
from enum import Enum
from typing import Any, List, Tuple

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_CANONICAL_NAN_BITS = 0x7FF8000000000000

SCALAR_TYPES: Tuple[type, ...] = (bool, int, float)
PRIMITIVE_ARRAY_TYPES: Tuple[type, ...] = (bytes, bytearray, memoryview, array.array)
REFERENCE_ARRAY_TYPES: Tuple[type, ...] = (list, tuple)


class Shape(Enum):
    NULL = "null"
    SCALAR = "scalar"
    PRIMITIVE_ARRAY = "primitive_array"
    REFERENCE_ARRAY = "reference_array"
    CONTAINER = "container"
    MAPPING = "mapping"
    PARTICIPANT = "participant"
    OPAQUE = "opaque"


# Shapes that are traversed as an ordered sequence of elements
SEQUENCE_SHAPES = frozenset({Shape.REFERENCE_ARRAY, Shape.CONTAINER})


def classify(value: Any, capability: type, loose: bool) -> Shape:
    """
    Classify value for the accumulator computing `capability`.

    Args:
        value: Any Python value.
        capability: The participant class for this accumulator
            (Stringable, Hashable, Equalable or Orderable).
        loose: Whether generic containers and mappings are traversed.

    Returns:
        The Shape that selects the handling rule.
    """
    if value is None:
        return Shape.NULL
    if isinstance(value, SCALAR_TYPES):
        return Shape.SCALAR
    if isinstance(value, PRIMITIVE_ARRAY_TYPES):
        return Shape.PRIMITIVE_ARRAY
    if isinstance(value, capability):
        return Shape.PARTICIPANT
    if isinstance(value, REFERENCE_ARRAY_TYPES):
        return Shape.REFERENCE_ARRAY
    # str is a Collection of itself; it is never traversed
    if isinstance(value, str):
        return Shape.OPAQUE
    if loose:
        if isinstance(value, cabc.Mapping):
            return Shape.MAPPING
        if isinstance(value, cabc.Collection):
            return Shape.CONTAINER
    return Shape.OPAQUE


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


# =============================================================================
# Materialization
# =============================================================================


def elements(value: Any) -> List[Any]:
    """Elements of a primitive array as Python numbers, in index order."""
    if isinstance(value, memoryview):
        return value.tolist()
    return list(value)


def materialize(value: Any) -> List[Any]:
    """A container's elements as a reference array, iteration order preserved."""
    return list(value)


def split_mapping(mapping: cabc.Mapping) -> Tuple[List[Any], List[Any]]:
    """
    Split a mapping into parallel key and value arrays.

    Iterates items() once so keys[i] and values[i] always belong together.
    """
    keys: List[Any] = []
    values: List[Any] = []
    for k, v in mapping.items():
        keys.append(k)
        values.append(v)
    return keys, values


# =============================================================================
# Identity tags
# =============================================================================


def identity_tag(value: Any) -> str:
    """Run-local identity tag: lower-case hex of id(value)."""
    return format(id(value), "x")


def type_name(value: Any) -> str:
    return type(value).__name__


# =============================================================================
# 32-bit folding
# =============================================================================


def int32(value: int) -> int:
    """Wrap an int to the signed 32-bit range."""
    value &= _MASK32
    return value - (1 << 32) if value > _INT32_MAX else value


def long_bits(value: int) -> int:
    """Fold a 64-bit pattern to 32 bits: (v ^ (v >>> 32)) truncated."""
    bits = value & _MASK64
    return int32(bits ^ (bits >> 32))


def float_bits(value: float) -> int:
    """IEEE 754 double bit pattern of value, with NaN canonicalized."""
    if math.isnan(value):
        return _CANONICAL_NAN_BITS
    return struct.unpack(">q", struct.pack(">d", value))[0]


def fold_int(value: int) -> int:
    """Fold an arbitrary-precision int to a 32-bit hash contribution."""
    if _INT32_MIN <= value <= _INT32_MAX:
        return value
    if _INT64_MIN <= value <= _INT64_MAX:
        return long_bits(value)
    # Python's int hash is process-independent
    return long_bits(hash(value))


def fold_scalar(value: Any) -> int:
    """32-bit contribution of a bool, int or float."""
    if isinstance(value, bool):
        return 0 if value else 1
    if isinstance(value, int):
        return fold_int(value)
    return long_bits(float_bits(float(value)))


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


def native_compare(a: Any, b: Any) -> int:
    """
    Three-way compare via the values' own ordering.

    Raises:
        TypeError: If the values do not support ordering against each other.
    """
    if a < b:
        return -1
    if a > b:
        return 1
    return 0
