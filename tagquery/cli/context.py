from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from tagquery.exceptions import (
    ExpressionSyntaxError,
    SavedSearchNotFoundError,
    SavedSearchStoreError,
    TagQueryError,
)
from tagquery.saved_searches import SavedSearchStore

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]

DEFAULT_BASE_URL = "http://localhost:5173"
BASE_URL_ENV = "TAGQUERY_BASE_URL"
STORE_ENV = "TAGQUERY_STORE"


def default_store_path() -> Path:
    return Path.home() / ".config" / "tagquery" / "saved_searches.json"


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    base_url: str | None = None
    store_path: Path | None = None
    log_file: Path | None = None

    _store: SavedSearchStore | None = None

    def resolve_base_url(self) -> str:
        """Option, then environment, then the built-in default."""
        value = self.base_url or os.getenv(BASE_URL_ENV, "").strip() or DEFAULT_BASE_URL
        if "://" not in value:
            raise CLIError.usage(
                f"Base URL must start with http:// or https://: {value}",
                hint=f"Pass --base-url or set {BASE_URL_ENV}.",
            )
        return value

    def resolve_store_path(self) -> Path:
        if self.store_path is not None:
            return self.store_path.expanduser()
        env_path = os.getenv(STORE_ENV, "").strip()
        if env_path:
            return Path(env_path).expanduser()
        return default_store_path()

    def get_store(self) -> SavedSearchStore:
        if self._store is None:
            self._store = SavedSearchStore(self.resolve_store_path())
        return self._store


def normalize_exception(exc: Exception) -> Exception:
    """Map library errors onto `CLIError`s with exit codes and error types."""
    if isinstance(exc, CLIError):
        return exc
    if isinstance(exc, ExpressionSyntaxError):
        details = {"expression": exc.expression} if exc.expression else None
        return CLIError(
            exc.message,
            exit_code=2,
            error_type="syntax_error",
            hint="Combine tags with AND, OR, NOT and balanced parentheses.",
            details=details,
        )
    if isinstance(exc, SavedSearchNotFoundError):
        return CLIError(
            exc.message,
            exit_code=4,
            error_type="not_found",
            details={"id": exc.search_id},
        )
    if isinstance(exc, SavedSearchStoreError):
        details = {"path": str(exc.path)} if exc.path is not None else None
        return CLIError(exc.message, exit_code=1, error_type="io_error", details=details)
    if isinstance(exc, TagQueryError):
        return CLIError(exc.message, exit_code=1, error_type="error")
    return exc


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    return 1


def error_info_for_exception(exc: Exception, *, verbosity: int = 0) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type,
            message=exc.message,
            hint=exc.hint,
            details=exc.details,
        )
    details = {"exception": exc.__class__.__name__} if verbosity >= 1 else None
    return ErrorInfo(type="internal_error", message=str(exc) or repr(exc), details=details)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms),
        error=error,
    )
