"""Render expression trees back to canonical text."""

from __future__ import annotations

from .expression import Expression, ExpressionKind


def to_string(expr: Expression) -> str:
    """
    Convert an expression back to human-readable text.

    `or` children of an `and` node are parenthesised to keep precedence
    visible; `not` wraps anything other than a single tag.

    Examples:
        >>> a, b, c = (Expression.tag(name) for name in "abc")
        >>> to_string(Expression.and_(Expression.or_(a, b), c))
        '(a OR b) AND c'
    """
    if expr.kind == ExpressionKind.TAG:
        return str(expr.value)

    if expr.kind == ExpressionKind.AND:
        parts = []
        for child in expr.children:
            # OR binds looser than AND
            if child.kind == ExpressionKind.OR:
                parts.append(f"({to_string(child)})")
            else:
                parts.append(to_string(child))
        return " AND ".join(parts)

    if expr.kind == ExpressionKind.OR:
        return " OR ".join(to_string(child) for child in expr.children)

    if expr.kind == ExpressionKind.NOT:
        children = expr.children
        if len(children) != 1:
            return "NOT ?"
        inner = to_string(children[0])
        if children[0].kind != ExpressionKind.TAG:
            return f"NOT ({inner})"
        return f"NOT {inner}"

    return "?"
