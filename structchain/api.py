"""
High-level structchain API.

Each function below is one top-level run: it creates a fresh registry,
traverses the value(s), and discards the registry when it returns.

    debug_string(value)          -> str
    structural_hash(value)       -> int
    structural_equals(a, b)      -> bool
    structural_compare(a, b)     -> int

Conventional is a convenience base for participants that want Python's
dunder protocol (str(), hash(), ==, <) wired to their structural methods.
"""

from __future__ import annotations

import functools
from typing import Any, Optional

from structchain.comparison_chain import ComparisonChain
from structchain.equality_chain import EqualityChain
from structchain.hash_chain import HashChain
from structchain.protocols import Equalable, Hashable, Orderable, Stringable
from structchain.registry import SeenList, SeenMap
from structchain.string_chain import IDENTITY_FIELD, StringChain
from structchain.traversal import identity_tag


def debug_string(value: Any, loose_collections: Optional[bool] = None) -> str:
    """
    Render value as an informational, multi-line debug string.

    The first line is the root's $identity tag. A Stringable root contributes
    its own field lines; any other value is rendered as a single `value`
    field.
    """
    seen = SeenList()
    if isinstance(value, Stringable):
        chain = StringChain(0, seen, loose_collections).start(value)
        return chain.finish() + value.render(0, seen)
    chain = StringChain(0, seen, loose_collections).include(IDENTITY_FIELD, identity_tag(value))
    return chain.next("value", value).finish()


def structural_hash(value: Any, loose_collections: Optional[bool] = None) -> int:
    """Signed 32-bit structural hash of value. Stable within one process."""
    return HashChain(SeenMap(), loose_collections).next(value).finish()


def structural_equals(a: Any, b: Any, loose_collections: Optional[bool] = None) -> bool:
    """True if a and b are structurally equal, cycles included."""
    return EqualityChain(SeenMap(), loose_collections).next(a, b).finish()


def structural_compare(
    a: Any,
    b: Any,
    loose_collections: Optional[bool] = None,
    normalize: Optional[bool] = None,
) -> int:
    """
    Three-way structural comparison: <0, 0 or >0.

    Unorderable components count as ties, so 0 does not imply equality.
    """
    return ComparisonChain(SeenMap(), loose_collections, normalize).next(a, b).finish()


@functools.total_ordering
class Conventional(Stringable, Hashable, Equalable, Orderable):
    """
    Participant base with the Python dunders wired to a fresh run.

    Subclasses implement render, structural_hash, structural_equals and
    structural_compare.
    """

    def __str__(self) -> str:
        return debug_string(self)

    def __hash__(self) -> int:
        return self.structural_hash(SeenMap())

    def __eq__(self, other: Any) -> bool:
        return bool(self.structural_equals(other, SeenMap()))

    def __lt__(self, other: Any) -> bool:
        return self.structural_compare(other, SeenMap()) < 0
