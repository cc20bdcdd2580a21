"""
structchain public API surface.

Four accumulators that fold an arbitrary, possibly cyclic object graph into a
single value:

    - StringChain       informational debug string
    - HashChain         32-bit structural hash code
    - EqualityChain     structural equality
    - ComparisonChain   three-way structural ordering

They share one traversal protocol: values are dispatched by shape
(structchain.traversal), compound values are registered by identity in a
per-run registry (structchain.registry), and revisiting a registered value
resolves through the registry instead of recursing again.

Participants opt in by subclassing Stringable, Hashable, Equalable and/or
Orderable (structchain.protocols), or Conventional for all four at once.
"""

from __future__ import annotations

from structchain.api import (
    Conventional,
    debug_string,
    structural_compare,
    structural_equals,
    structural_hash,
)
from structchain.comparison_chain import ComparisonChain
from structchain.equality_chain import EqualityChain
from structchain.hash_chain import HashChain
from structchain.logs import configure_logging, get_logger
from structchain.protocols import (
    Equalable,
    Hashable,
    Orderable,
    Participant,
    Stringable,
    declared_base,
)
from structchain.registry import SeenList, SeenMap, Slot
from structchain.string_chain import StringChain
from structchain.traversal import Shape, classify

__all__ = [
    "ComparisonChain",
    "Conventional",
    "EqualityChain",
    "Equalable",
    "HashChain",
    "Hashable",
    "Orderable",
    "Participant",
    "SeenList",
    "SeenMap",
    "Shape",
    "Slot",
    "StringChain",
    "Stringable",
    "classify",
    "configure_logging",
    "debug_string",
    "declared_base",
    "get_logger",
    "structural_compare",
    "structural_equals",
    "structural_hash",
]

__version__ = "0.1.0"
