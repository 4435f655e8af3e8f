"""
Expression tree for boolean tag queries.

An expression is a small immutable tree of four node kinds:

- `tag`: a single tag literal, case preserved as written
- `and`: two or more children, all of which must match
- `or`: two or more children, any of which must match
- `not`: exactly one child, which must not match

Example:
    from tagquery.expression import Expression

    expr = Expression.and_(Expression.tag("ai"), Expression.not_(Expression.tag("deprecated")))
    expr.to_dict()
    # {"type": "and", "value": [{"type": "tag", "value": "ai"}, ...]}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ExpressionSyntaxError


class ExpressionKind(str, Enum):
    """Closed set of node kinds."""

    TAG = "tag"
    AND = "and"
    OR = "or"
    NOT = "not"


@dataclass(frozen=True)
class Expression:
    """
    A node in a parsed boolean tag expression.

    `value` holds the tag literal for `tag` nodes and a tuple of child
    expressions for every other kind.
    """

    kind: ExpressionKind
    value: str | tuple[Expression, ...]

    @classmethod
    def tag(cls, name: str) -> Expression:
        return cls(ExpressionKind.TAG, name)

    @classmethod
    def and_(cls, *children: Expression) -> Expression:
        return cls(ExpressionKind.AND, tuple(children))

    @classmethod
    def or_(cls, *children: Expression) -> Expression:
        return cls(ExpressionKind.OR, tuple(children))

    @classmethod
    def not_(cls, child: Expression) -> Expression:
        return cls(ExpressionKind.NOT, (child,))

    @property
    def is_tag(self) -> bool:
        return self.kind == ExpressionKind.TAG

    @property
    def children(self) -> tuple[Expression, ...]:
        """Child nodes; empty for tag leaves."""
        if isinstance(self.value, tuple):
            return self.value
        return ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-friendly `{"type": ..., "value": ...}` shape."""
        kind = self.kind.value if isinstance(self.kind, ExpressionKind) else str(self.kind)
        if isinstance(self.value, tuple):
            return {"type": kind, "value": [child.to_dict() for child in self.value]}
        return {"type": kind, "value": self.value}

    @classmethod
    def from_dict(cls, data: Any) -> Expression:
        """
        Build an expression from its `to_dict()` shape.

        Raises:
            ExpressionSyntaxError: If the node kind is unknown or the payload
                does not fit the kind.
        """
        if not isinstance(data, dict):
            raise ExpressionSyntaxError(f"Expected an expression object, got {type(data).__name__}")
        raw_kind = data.get("type")
        try:
            kind = ExpressionKind(str(raw_kind).lower())
        except ValueError:
            raise ExpressionSyntaxError(f"Unknown expression type: {raw_kind!r}") from None

        value = data.get("value")
        if kind == ExpressionKind.TAG:
            if not isinstance(value, str) or not value.strip():
                raise ExpressionSyntaxError("Tag expression requires a non-empty string value")
            return cls.tag(value)

        if not isinstance(value, list):
            raise ExpressionSyntaxError(f"'{kind.value}' expression requires a list of children")
        children = tuple(cls.from_dict(child) for child in value)
        if kind == ExpressionKind.NOT and len(children) != 1:
            raise ExpressionSyntaxError("'not' expression requires exactly one child")
        if kind in (ExpressionKind.AND, ExpressionKind.OR) and len(children) < 2:
            raise ExpressionSyntaxError(f"'{kind.value}' expression requires at least two children")
        return cls(kind, children)
