from __future__ import annotations

from typing import Any

from pydantic import Field

from tagquery.models import TagQueryModel


class ErrorInfo(TagQueryModel):
    type: str
    message: str
    hint: str | None = None
    details: dict[str, Any] | None = None


class CommandMeta(TagQueryModel):
    duration_ms: int = Field(..., alias="durationMs")


class CommandResult(TagQueryModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None
