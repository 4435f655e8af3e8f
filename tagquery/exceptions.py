"""Exception hierarchy for tagquery."""

from __future__ import annotations

from pathlib import Path


class TagQueryError(Exception):
    """Base class for all tagquery errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ExpressionSyntaxError(TagQueryError, ValueError):
    """Raised by the parser when a boolean tag expression is malformed."""

    def __init__(self, message: str, *, expression: str | None = None) -> None:
        super().__init__(message)
        self.expression = expression


class SavedSearchStoreError(TagQueryError):
    """Raised when the saved-search file cannot be read or written."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class SavedSearchNotFoundError(SavedSearchStoreError):
    """Raised when a saved search id does not exist in the store."""

    def __init__(self, search_id: str) -> None:
        super().__init__(f"Saved search not found: {search_id}")
        self.search_id = search_id
