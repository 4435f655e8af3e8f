"""Boolean tag expression parser and validator.

Parses strings such as ``ai AND NOT deprecated`` or ``writing OR creative``
into `Expression` trees. Precedence is NOT > AND > OR and operator keywords
are matched case-insensitively; tag literals keep the case they were written in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import ExpressionSyntaxError
from .expression import Expression, ExpressionKind

logger = logging.getLogger(__name__)

# Operator tokens include their surrounding spaces so "ORANGE" or "BAND" never split.
OR_TOKEN = " OR "
AND_TOKEN = " AND "
NOT_PREFIX = "NOT "


# =============================================================================
# Splitting
# =============================================================================


def split_by_operator(text: str, operator: str) -> list[str]:
    """
    Split `text` on `operator` occurrences at parenthesis depth 0.

    Matching is case-insensitive. Parts are trimmed. When the operator does not
    occur at depth 0 the original text is returned as the only element.

    Examples:
        >>> split_by_operator("a OR (b OR c)", " OR ")
        ['a', '(b OR c)']
        >>> split_by_operator("a and b", " AND ")
        ['a', 'b']
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    width = len(operator)
    i = 0

    while i < len(text):
        ch = text[i]
        if ch == "(":
            depth += 1
            current.append(ch)
            i += 1
        elif ch == ")":
            depth -= 1
            current.append(ch)
            i += 1
        elif depth == 0 and text[i : i + width].upper() == operator:
            parts.append("".join(current).strip())
            current = []
            i += width
        else:
            current.append(ch)
            i += 1

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)

    return parts if len(parts) > 1 else [text]


def _is_wrapped(text: str) -> bool:
    """True when the first `(` is closed by the final character."""
    if not (text.startswith("(") and text.endswith(")")):
        return False
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
    return False


# =============================================================================
# Parsing
# =============================================================================


def _parse_precedence(text: str) -> Expression:
    """Parse text without resolving parenthesised groups first."""
    text = text.strip()
    if not text:
        raise ExpressionSyntaxError("Empty expression", expression=text)

    # NOT takes the whole remainder as its operand.
    if text[: len(NOT_PREFIX)].upper() == NOT_PREFIX:
        return Expression(ExpressionKind.NOT, (_parse_precedence(text[len(NOT_PREFIX) :]),))

    or_parts = split_by_operator(text, OR_TOKEN)
    if len(or_parts) > 1:
        return Expression(ExpressionKind.OR, tuple(_parse_precedence(p) for p in or_parts))

    and_parts = split_by_operator(text, AND_TOKEN)
    if len(and_parts) > 1:
        return Expression(ExpressionKind.AND, tuple(_parse_precedence(p) for p in and_parts))

    if _is_wrapped(text):
        return _parse_precedence(text[1:-1])

    return Expression.tag(text)


def _resolve_parentheses(text: str) -> Expression:
    """
    Resolve the first top-level parenthesised group.

    A group spanning the whole text is returned as its parsed content. Otherwise
    the group's content is put back in place without its parentheses and the
    result is parsed again; any later groups are left to `_parse_precedence`.
    """
    depth = 0
    start = -1

    for i, ch in enumerate(text):
        if ch == "(":
            if depth == 0:
                start = i
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0 and start >= 0:
                inner = text[start + 1 : i]
                inner_expr = _parse_precedence(inner)
                if start == 0 and i == len(text) - 1:
                    return inner_expr
                substituted = text[:start] + inner + text[i + 1 :]
                logger.debug("Resolved group %r; reparsing %r", inner, substituted)
                return _parse_precedence(substituted)

    raise ExpressionSyntaxError("Unbalanced parentheses in expression", expression=text)


def parse(text: str) -> Expression:
    """
    Parse a boolean tag expression into an `Expression` tree.

    Args:
        text: Expression such as ``"ai AND analysis OR writing"``

    Returns:
        The root node of the parsed tree

    Raises:
        ExpressionSyntaxError: If the expression is empty or its parentheses
            never balance

    Examples:
        >>> parse("ai").to_dict()
        {'type': 'tag', 'value': 'ai'}
        >>> parse("ai AND analysis OR writing").kind.value
        'or'
    """
    text = text.strip()
    if not text:
        raise ExpressionSyntaxError("Empty expression", expression=text)

    if "(" in text:
        return _resolve_parentheses(text)
    return _parse_precedence(text)


# =============================================================================
# Validation
# =============================================================================


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of `validate`."""

    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


def validate(text: str) -> ValidationResult:
    """Check expression syntax without raising."""
    if not isinstance(text, str):
        return ValidationResult(valid=False, error="Invalid expression")
    try:
        parse(text)
    except ExpressionSyntaxError as exc:
        return ValidationResult(valid=False, error=exc.message)
    except RecursionError:
        return ValidationResult(valid=False, error="Expression is nested too deeply")
    return ValidationResult(valid=True)
