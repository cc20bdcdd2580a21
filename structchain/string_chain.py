"""
StringChain: informational debug strings for possibly cyclic object graphs.

Output is for logs and debugging only; it is neither stable across runs nor
meant to be parsed. Every field renders as one line

    <indent>name = value

and compound values open a block tagged with their type and identity. A
top-level debug string of a two-node cycle reads:

    $identity = 7f3a2c1d0e80
    name = "root"
    next = {Node@7f3a2c1d1f40
        name = "leaf"
        next = {Node@7f3a2c1d0e80}
    }

A compound value already in the run's SeenList renders as a bare
{Type@hex} backreference instead of recursing, so cyclic graphs produce
bounded output.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from structchain import config
from structchain.protocols import Stringable
from structchain.registry import SeenList
from structchain.traversal import (
    SEQUENCE_SHAPES,
    Shape,
    classify,
    elements,
    identity_tag,
    materialize,
    split_mapping,
    type_name,
)

LINE_SEPARATOR = "\n"
IDENTITY_FIELD = "$identity"
BASE_FIELD = "$base"


def indentation(level: int) -> str:
    return " " * (config.INDENT_WIDTH * level)


def quote(text: str) -> str:
    """Double-quote text with JSON escapes (newlines, quotes, control chars)."""
    return json.dumps(text, ensure_ascii=False)


def _escape(text: str) -> str:
    return quote(text)[1:-1]


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _header(value: Any) -> str:
    return "{" + type_name(value) + "@" + identity_tag(value)


class StringChain:
    """
    Builder for an indented, multi-line debug string.

    Usage (inside a Stringable participant):
        def render(self, indent, seen):
            return StringChain(indent, seen).next("name", self.name).finish()
    """

    def __init__(self, indent: int = 0, seen: Optional[SeenList] = None, loose_collections: Optional[bool] = None) -> None:
        if not isinstance(indent, int) or isinstance(indent, bool):
            raise TypeError(f"indent must be an int, got {type(indent).__name__}")
        if indent < 0:
            raise ValueError(f"indent must be >= 0, got {indent}")
        self.indent = indent
        self.seen = seen if seen is not None else SeenList()
        self.loose_collections = config.resolve_loose(loose_collections)
        self._lines: List[str] = []

    def start(self, value: Any) -> "StringChain":
        """Mark value as seen and record its $identity pseudo-field."""
        self.seen.add(value)
        return self.include(IDENTITY_FIELD, identity_tag(value))

    def include(self, name: str, text: str) -> "StringChain":
        """Append a pre-rendered line."""
        if not isinstance(name, str):
            raise TypeError(f"field name must be a str, got {type(name).__name__}")
        self._lines.append(indentation(self.indent) + name + " = " + text + LINE_SEPARATOR)
        return self

    def next(self, name: str, value: Any) -> "StringChain":
        """Render one named field."""
        return self.include(name, self.render_value(value))

    def include_base(self, target: Stringable, layer: Optional[type] = None) -> "StringChain":
        """Render target's base layer as a $base block."""
        pad = indentation(self.indent)
        if target.supports_stringable_base(layer):
            body = target.render_base(self.indent + 1, self.seen, layer)
            self._lines.append(pad + BASE_FIELD + " = {" + LINE_SEPARATOR + body + pad + "}" + LINE_SEPARATOR)
        else:
            body = _escape(target.render_base(self.indent + 1, self.seen, layer))
            self._lines.append(pad + BASE_FIELD + " = {" + body + "}" + LINE_SEPARATOR)
        return self

    def render_value(self, value: Any) -> str:
        """Render value as it would appear to the right of `name = `."""
        shape = classify(value, Stringable, self.loose_collections)

        if shape is Shape.NULL:
            return "null"
        if shape is Shape.SCALAR:
            return _scalar_text(value)
        if shape is Shape.PRIMITIVE_ARRAY:
            return "[" + ", ".join(_scalar_text(v) for v in elements(value)) + "]"
        if isinstance(value, str):
            return quote(value)
        if value in self.seen:
            return _header(value) + "}"

        self.seen.add(value)
        pad = indentation(self.indent)
        if shape is Shape.OPAQUE:
            return _header(value) + " " + _escape(str(value)) + "}"
        with self.seen.descend(value):
            if shape is Shape.PARTICIPANT:
                body = value.render(self.indent + 1, self.seen)
            elif shape in SEQUENCE_SHAPES:
                body = self._render_elements(materialize(value))
            else:
                keys, values = split_mapping(value)
                body = (
                    self._sub()
                    .next("keys", keys)
                    .next("values", values)
                    .finish()
                )
        return _header(value) + LINE_SEPARATOR + body + pad + "}"

    def _sub(self) -> "StringChain":
        return StringChain(self.indent + 1, self.seen, self.loose_collections)

    def _render_elements(self, items: List[Any]) -> str:
        sub = self._sub()
        for i, v in enumerate(items):
            sub.next(str(i), v)
        return sub.finish()

    def finish(self) -> str:
        return "".join(self._lines)

    def __str__(self) -> str:
        return self.finish()
