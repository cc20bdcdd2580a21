"""
Pytest configuration for structchain tests.

Provides:
- Hypothesis configuration for deterministic fuzzing
- Shared participant types (Node, Point2D/Point3D, Tagged, Delta) used to
  build cyclic and layered graphs
"""

import os

from structchain import (
    ComparisonChain,
    Conventional,
    EqualityChain,
    HashChain,
    Orderable,
    StringChain,
)

# =============================================================================
# Hypothesis Configuration
# =============================================================================
# - print_blob=True makes failures easy to reproduce
# - Omitting database= keeps the default .hypothesis/ example cache

try:
    from hypothesis import settings

    settings.register_profile(
        "default",
        print_blob=True,
        derandomize=False,
    )

    settings.register_profile(
        "ci",
        print_blob=True,
        derandomize=False,
    )

    profile = os.environ.get("HYPOTHESIS_PROFILE", "default")
    settings.load_profile(profile)

except ImportError:
    pass  # hypothesis not installed, skip configuration


# =============================================================================
# Shared Participants
# =============================================================================


class Node(Conventional):
    """Linked node: the smallest graph that can form a cycle."""

    def __init__(self, name, value=0, next=None):
        self.name = name
        self.value = value
        self.next = next

    def render(self, indent, seen):
        return (
            StringChain(indent, seen)
            .next("name", self.name)
            .next("value", self.value)
            .next("next", self.next)
            .finish()
        )

    def structural_hash(self, seen):
        return HashChain(seen).next(self.name).next(self.value).next(self.next).finish()

    def structural_equals(self, other, seen):
        return EqualityChain(seen).start(self, other).safe_compare(
            lambda c: c.next(self.name, other.name)
            .next(self.value, other.value)
            .next(self.next, other.next)
        )

    def structural_compare(self, other, seen):
        return (
            ComparisonChain(seen)
            .next(self.value, other.value)
            .next(self.name, other.name)
            .next(self.next, other.next)
            .finish()
        )


def ring(*values, name="n"):
    """Build a cycle of Nodes (values[0] -> values[1] -> ... -> values[0])."""
    nodes = [Node(name, v) for v in values]
    for i, node in enumerate(nodes):
        node.next = nodes[(i + 1) % len(nodes)]
    return nodes


class Point2D(Conventional):
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def render(self, indent, seen):
        return StringChain(indent, seen).next("x", self.x).next("y", self.y).finish()

    def structural_hash(self, seen):
        return HashChain(seen).next(self.x).next(self.y).finish()

    def structural_equals(self, other, seen):
        return EqualityChain(seen).start(self, other).safe_compare(
            lambda c: c.next(self.x, other.x).next(self.y, other.y)
        )

    def structural_compare(self, other, seen):
        return ComparisonChain(seen).next(self.x, other.x).next(self.y, other.y).finish()


class Point3D(Point2D):
    structural_base = Point2D

    def __init__(self, x, y, z):
        super().__init__(x, y)
        self.z = z

    def render(self, indent, seen):
        return StringChain(indent, seen).include_base(self, Point3D).next("z", self.z).finish()

    def structural_hash(self, seen):
        return HashChain(seen).include_base(self, Point3D).next(self.z).finish()

    def structural_equals(self, other, seen):
        return EqualityChain(seen).start(self, other).safe_compare(
            lambda c: c.include_base(self, other, Point3D).next(self.z, other.z)
        )

    def structural_compare(self, other, seen):
        return ComparisonChain(seen).next(self.z, other.z).finish()


class Plain:
    """Non-participating base with its own value semantics."""

    def __init__(self, tag):
        self.tag = tag

    def __eq__(self, other):
        if not isinstance(other, Plain):
            return NotImplemented
        return self.tag == other.tag

    def __hash__(self):
        return hash(self.tag)

    def __repr__(self):
        return f"Plain(tag={self.tag})"


class Tagged(Plain, Conventional):
    structural_base = Plain

    def __init__(self, tag, label):
        super().__init__(tag)
        self.label = label

    def render(self, indent, seen):
        return StringChain(indent, seen).include_base(self, Tagged).next("label", self.label).finish()

    def structural_hash(self, seen):
        return HashChain(seen).include_base(self, Tagged).next(self.label).finish()

    def structural_equals(self, other, seen):
        return EqualityChain(seen).start(self, other).safe_compare(
            lambda c: c.include_base(self, other, Tagged).next(self.label, other.label)
        )

    def structural_compare(self, other, seen):
        return ComparisonChain(seen).next(self.label, other.label).finish()

    __hash__ = Conventional.__hash__
    __eq__ = Conventional.__eq__


class Delta(Orderable):
    """Orderable that reports a raw, unclamped delta."""

    def __init__(self, amount):
        self.amount = amount

    def structural_compare(self, other, seen):
        return self.amount - other.amount
