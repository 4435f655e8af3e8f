"""
Pydantic models shared across tagquery.

Records use camelCase aliases on the wire (``isArchived``) and accept
snake_case names when constructed from Python.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TagQueryModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )


class TaggedItem(TagQueryModel):
    """A content item carrying free-form tags."""

    id: str
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    is_archived: bool = Field(False, alias="isArchived")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
