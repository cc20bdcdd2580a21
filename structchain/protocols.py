"""
Participant capabilities.

A participant opts into structural handling by subclassing one or more of:

    - Stringable  render(indent, seen) -> str
    - Hashable    structural_hash(seen) -> int
    - Equalable   structural_equals(other, seen) -> bool
    - Orderable   structural_compare(other, seen) -> int

Each entry point receives the run's shared registry (`seen`) and is expected
to build a chain over that same registry, e.g.:

    def structural_hash(self, seen):
        return HashChain(seen).next(self.name).next(self.children).finish()

Layering
--------
A participant class may declare the class it extends structurally:

    class Point3D(Point2D):
        structural_base = Point2D

The declaration is read from the class's own namespace, so a subclass that
does not declare a base has none. The *_base hooks take a `layer` argument
naming the class whose base is meant (defaults to type(self)); Point3D's
render passes layer=Point3D, Point2D's passes layer=Point2D, and each level is
folded exactly once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from structchain.registry import SeenList, SeenMap


def declared_base(layer: type) -> Optional[type]:
    """The base layer declared by `layer` itself, or None."""
    return vars(layer).get("structural_base")


class Participant:
    """Common root of the four capabilities."""

    structural_base: Optional[type] = None

    def _base_layer(self, layer: Optional[type]) -> Optional[type]:
        return declared_base(layer if layer is not None else type(self))


# =============================================================================
# Stringable
# =============================================================================


class Stringable(Participant, ABC):
    """Participant that renders itself into a StringChain debug string."""

    @abstractmethod
    def render(self, indent: int, seen: SeenList) -> str:
        """Return the field lines for self at `indent`, sharing `seen`."""

    def supports_stringable_base(self, layer: Optional[type] = None) -> bool:
        base = self._base_layer(layer)
        return base is not None and issubclass(base, Stringable)

    def render_base(self, indent: int, seen: SeenList, layer: Optional[type] = None) -> str:
        """
        Render the base layer.

        Returns the base's own field lines when the base is Stringable,
        otherwise a single-line repr from the base (or object).
        """
        base = self._base_layer(layer)
        if base is not None and issubclass(base, Stringable):
            return base.render(self, indent, seen)
        return (base or object).__repr__(self)

    def to_human_readable(self) -> str:
        """
        Human-facing form of self.

        Defaults to the informational debug string; override to provide a
        presentation such as "3/4" for a fraction.
        """
        from structchain.api import debug_string
        return debug_string(self)


# =============================================================================
# Hashable
# =============================================================================


class Hashable(Participant, ABC):
    """Participant that folds itself into a HashChain."""

    @abstractmethod
    def structural_hash(self, seen: SeenMap) -> int:
        """Return the hash of self, sharing `seen`."""

    def base_hash(self, seen: SeenMap, layer: Optional[type] = None) -> int:
        base = self._base_layer(layer)
        if base is not None and issubclass(base, Hashable):
            return base.structural_hash(self, seen)
        return (base or object).__hash__(self)


# =============================================================================
# Equalable
# =============================================================================


class Equalable(Participant, ABC):
    """Participant that compares itself for equality through an EqualityChain."""

    @abstractmethod
    def structural_equals(self, other: Any, seen: SeenMap) -> bool:
        """Return True if self equals other, sharing `seen`."""

    def base_equals(self, other: Any, seen: SeenMap, layer: Optional[type] = None) -> bool:
        base = self._base_layer(layer)
        if base is not None and issubclass(base, Equalable):
            return base.structural_equals(self, other, seen)
        result = (base or object).__eq__(self, other)
        if result is NotImplemented:
            return self is other
        return bool(result)


# =============================================================================
# Orderable
# =============================================================================


class Orderable(Participant, ABC):
    """
    Participant that orders itself through a ComparisonChain.

    Values the chain cannot order contribute zero, so a zero result does not
    imply equality.
    """

    @abstractmethod
    def structural_compare(self, other: Any, seen: SeenMap) -> int:
        """Return <0, 0 or >0 as self orders before, with, or after other."""
