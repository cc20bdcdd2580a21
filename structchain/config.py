"""
Environment-driven defaults for structchain accumulators.

Flags are read once at import time. Every accumulator constructor accepts an
explicit argument that overrides the flag for that run.
"""

from __future__ import annotations

import os

# Feature flag: set STRUCTCHAIN_LOOSE_COLLECTIONS=0 to treat sets, deques and
# mappings as opaque values instead of traversing their elements
LOOSE_COLLECTIONS = os.environ.get("STRUCTCHAIN_LOOSE_COLLECTIONS", "1") == "1"

# Feature flag: set STRUCTCHAIN_NORMALIZE=1 to clamp every comparison
# contribution to -1/0/1
NORMALIZE_COMPARISONS = os.environ.get("STRUCTCHAIN_NORMALIZE", "0") == "1"

# Spaces per indent level in debug strings
INDENT_WIDTH = int(os.environ.get("STRUCTCHAIN_INDENT_WIDTH", "4"))

# Nesting limit for one run; deeper values raise ValueError instead of
# exhausting the interpreter stack
MAX_DEPTH = int(os.environ.get("STRUCTCHAIN_MAX_DEPTH", "200"))


def resolve_loose(loose_collections: bool | None) -> bool:
    """Return the explicit setting, or the environment default."""
    return loose_collections if loose_collections is not None else LOOSE_COLLECTIONS


def resolve_normalize(normalize: bool | None) -> bool:
    """Return the explicit setting, or the environment default."""
    return normalize if normalize is not None else NORMALIZE_COMPARISONS
