"""
Filtering helpers for collections of tagged items.

Example:
    from tagquery import parse
    from tagquery.items import filter_items, load_items

    items = load_items("items.json")
    matches = filter_items(items, parse("ai AND NOT deprecated"))
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from .evaluator import evaluate
from .exceptions import TagQueryError
from .expression import Expression
from .models import TaggedItem

logger = logging.getLogger(__name__)


def filter_items(
    items: Iterable[TaggedItem],
    expr: Expression,
    *,
    include_archived: bool = False,
) -> list[TaggedItem]:
    """Return items whose tags satisfy `expr`, skipping archived ones by default."""
    return [
        item
        for item in items
        if (include_archived or not item.is_archived) and evaluate(expr, item.tags)
    ]


def filter_by_tag(items: Iterable[TaggedItem], tag: str) -> list[TaggedItem]:
    """Return non-archived items with a tag containing `tag` (case-insensitive)."""
    needle = tag.casefold()
    return [
        item
        for item in items
        if not item.is_archived and any(needle in t.casefold() for t in item.tags)
    ]


def all_tags(items: Iterable[TaggedItem]) -> list[str]:
    """Sorted unique tags across non-archived items."""
    tags: set[str] = set()
    for item in items:
        if not item.is_archived:
            tags.update(item.tags)
    return sorted(tags)


def load_items(path: str | Path) -> list[TaggedItem]:
    """
    Load items from a JSON file holding an array of item objects.

    Raises:
        TagQueryError: If the file is missing or unreadable, is not valid JSON,
            or an entry is not a valid item
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise TagQueryError(f"Items file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise TagQueryError(f"Items file is not valid JSON: {path} ({exc.msg})") from exc
    except UnicodeDecodeError as exc:
        raise TagQueryError(f"Items file is not valid UTF-8: {path} ({exc.reason})") from exc
    except OSError as exc:
        raise TagQueryError(f"Cannot read items file: {path} ({exc})") from exc

    if not isinstance(raw, list):
        raise TagQueryError(f"Items file must contain a JSON array: {path}")

    try:
        items = [TaggedItem.model_validate(entry) for entry in raw]
    except ValidationError as exc:
        raise TagQueryError(f"Invalid item in {path}: {exc.errors()[0]['msg']}") from exc

    logger.debug("Loaded %d items from %s", len(items), path)
    return items
