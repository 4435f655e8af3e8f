"""
Boolean tag expressions.

Parse queries like ``ai AND analysis OR NOT deprecated`` into immutable
trees, evaluate them against an item's tags, render them back to canonical
text and list the tags they mention.

Example:
    from tagquery import evaluate, extract_tags, parse, to_string

    expr = parse("ai AND analysis OR writing")
    evaluate(expr, ["writing"])   # True
    to_string(expr)               # "ai AND analysis OR writing"
    extract_tags(expr)            # ["ai", "analysis", "writing"]
"""

from __future__ import annotations

from .evaluator import evaluate
from .exceptions import (
    ExpressionSyntaxError,
    SavedSearchNotFoundError,
    SavedSearchStoreError,
    TagQueryError,
)
from .expression import Expression, ExpressionKind
from .parser import ValidationResult, parse, split_by_operator, validate
from .serializer import to_string
from .tags import extract_tags

__version__ = "0.1.0"

__all__ = [
    "Expression",
    "ExpressionKind",
    "ExpressionSyntaxError",
    "SavedSearchNotFoundError",
    "SavedSearchStoreError",
    "TagQueryError",
    "ValidationResult",
    "__version__",
    "evaluate",
    "extract_tags",
    "parse",
    "split_by_operator",
    "to_string",
    "validate",
]
