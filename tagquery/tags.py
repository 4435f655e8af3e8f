"""Collect the tag literals referenced by an expression."""

from __future__ import annotations

from .expression import Expression, ExpressionKind


def extract_tags(expr: Expression) -> list[str]:
    """
    Return every tag literal in `expr`, in first-seen (pre-order) order.

    Duplicates are removed by exact string comparison, so ``AI`` and ``ai``
    are both kept.
    """
    found: dict[str, None] = {}

    def collect(node: Expression) -> None:
        if node.kind == ExpressionKind.TAG:
            if isinstance(node.value, str):
                found.setdefault(node.value, None)
            return
        for child in node.children:
            collect(child)

    collect(expr)
    return list(found)
