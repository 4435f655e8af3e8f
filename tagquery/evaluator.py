"""Evaluate expression trees against an item's tags."""

from __future__ import annotations

from collections.abc import Iterable

from .expression import Expression, ExpressionKind


def _matches(expr: Expression, tags: frozenset[str]) -> bool:
    if expr.kind == ExpressionKind.TAG:
        return isinstance(expr.value, str) and expr.value.casefold() in tags

    if expr.kind == ExpressionKind.AND:
        return all(_matches(child, tags) for child in expr.children)

    if expr.kind == ExpressionKind.OR:
        return any(_matches(child, tags) for child in expr.children)

    if expr.kind == ExpressionKind.NOT:
        children = expr.children
        if len(children) != 1:
            return False
        return not _matches(children[0], tags)

    return False


def evaluate(expr: Expression, tags: Iterable[str]) -> bool:
    """
    Evaluate an expression against a collection of tags.

    Tag comparison is case-insensitive. Malformed nodes (a `not` without
    exactly one child, an unknown kind) evaluate to False.

    Examples:
        >>> from tagquery.parser import parse
        >>> evaluate(parse("ai AND NOT deprecated"), ["AI", "analysis"])
        True
    """
    return _matches(expr, frozenset(tag.casefold() for tag in tags))
