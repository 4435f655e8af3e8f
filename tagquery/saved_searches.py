"""
Saved searches.

A saved search is a named expression with an optional free-text query. The
expression is stored as its canonical string; `SavedSearch.parsed()` turns it
back into a tree. A tree whose canonical string would parse differently (an
AND holding an OR after the first group, for instance) is also kept as `tree`
so its meaning survives a save. `SavedSearchStore` keeps the collection in a
JSON file.

Example:
    from tagquery.saved_searches import SavedSearch, SavedSearchStore

    store = SavedSearchStore("~/.config/tagquery/saved_searches.json")
    store.add(SavedSearch.create("AI research", "ai AND NOT deprecated"))
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from .evaluator import evaluate
from .exceptions import SavedSearchNotFoundError, SavedSearchStoreError
from .expression import Expression
from .models import TagQueryModel
from .parser import parse, validate
from .serializer import to_string

logger = logging.getLogger(__name__)

# Key written by older releases; dropped on load.
_LEGACY_KEYS = ("createdAt",)


def _is_legacy(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    return any(k in entry for k in _LEGACY_KEYS) or isinstance(entry.get("expression"), dict)


class SavedSearch(TagQueryModel):
    """A named, persisted tag expression."""

    id: str
    name: str = Field(..., min_length=1)
    expression: str
    query: str | None = None
    # Set only when `expression` does not parse back to the saved tree.
    tree: dict[str, Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_expression(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        expression = data.get("expression")
        if isinstance(expression, dict):
            # Older records stored the tree itself.
            expression = Expression.from_dict(expression)
        if isinstance(expression, Expression):
            text = to_string(expression)
            data = {**data, "expression": text}
            if validate(text).valid and parse(text) != expression:
                data["tree"] = expression.to_dict()
        return data

    @field_validator("expression")
    @classmethod
    def _check_expression(cls, value: str) -> str:
        result = validate(value)
        if not result.valid:
            raise ValueError(f"Invalid expression: {result.error}")
        return value.strip()

    @field_validator("tree")
    @classmethod
    def _check_tree(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        if value is None:
            return None
        return Expression.from_dict(value).to_dict()

    @classmethod
    def create(
        cls,
        name: str,
        expression: str | Expression,
        *,
        query: str | None = None,
    ) -> SavedSearch:
        """Create a saved search with a fresh id."""
        return cls.model_validate(
            {"id": str(uuid.uuid4()), "name": name, "expression": expression, "query": query}
        )

    def parsed(self) -> Expression:
        if self.tree is not None:
            return Expression.from_dict(self.tree)
        return parse(self.expression)

    def matches(self, tags: Iterable[str]) -> bool:
        return evaluate(self.parsed(), tags)


class SavedSearchStore:
    """JSON-file backed collection of saved searches."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._searches: list[SavedSearch] | None = None

    def load(self) -> list[SavedSearch]:
        """
        (Re)load the collection from disk.

        A missing file is an empty collection.

        Raises:
            SavedSearchStoreError: If the file is unreadable or holds invalid records
        """
        if not self.path.exists():
            self._searches = []
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SavedSearchStoreError(
                f"Saved searches file is not valid JSON: {self.path} ({exc.msg})", path=self.path
            ) from exc
        except UnicodeDecodeError as exc:
            raise SavedSearchStoreError(
                f"Saved searches file is not valid UTF-8: {self.path} ({exc.reason})",
                path=self.path,
            ) from exc
        except OSError as exc:
            raise SavedSearchStoreError(
                f"Cannot read saved searches file: {self.path} ({exc})", path=self.path
            ) from exc

        if not isinstance(raw, list):
            raise SavedSearchStoreError(
                f"Saved searches file must contain a JSON array: {self.path}", path=self.path
            )

        try:
            searches = [SavedSearch.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            first = exc.errors()[0]
            raise SavedSearchStoreError(
                f"Invalid saved search in {self.path}: {first['msg']}", path=self.path
            ) from exc

        self._searches = searches
        if any(_is_legacy(entry) for entry in raw):
            logger.info("Migrating saved searches in %s to the current format", self.path)
            self._save()

        logger.debug("Loaded %d saved searches from %s", len(searches), self.path)
        return list(searches)

    def _loaded(self) -> list[SavedSearch]:
        if self._searches is None:
            self.load()
        assert self._searches is not None
        return self._searches

    def _save(self) -> None:
        payload = [
            search.model_dump(by_alias=True, exclude_none=True, mode="json")
            for search in self._loaded()
        ]
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            text = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise SavedSearchStoreError(
                f"Cannot write saved searches file: {self.path} ({exc})", path=self.path
            ) from exc

    def list(self) -> list[SavedSearch]:
        return list(self._loaded())

    def get(self, search_id: str) -> SavedSearch:
        for search in self._loaded():
            if search.id == search_id:
                return search
        raise SavedSearchNotFoundError(search_id)

    def add(self, search: SavedSearch) -> SavedSearch:
        searches = self._loaded()
        if any(existing.id == search.id for existing in searches):
            raise SavedSearchStoreError(
                f"Saved search already exists: {search.id}", path=self.path
            )
        searches.append(search)
        self._save()
        return search

    def update(self, search: SavedSearch) -> SavedSearch:
        searches = self._loaded()
        for index, existing in enumerate(searches):
            if existing.id == search.id:
                searches[index] = search
                self._save()
                return search
        raise SavedSearchNotFoundError(search.id)

    def remove(self, search_id: str) -> SavedSearch:
        searches = self._loaded()
        for index, existing in enumerate(searches):
            if existing.id == search_id:
                removed = searches.pop(index)
                self._save()
                return removed
        raise SavedSearchNotFoundError(search_id)
