"""
Base models for write requests.

Request models double as the column allow-list: their field names become
column names in INSERT and UPDATE statements, so unknown keys are rejected.
"""
from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    def to_columns(self) -> Dict[str, Any]:
        """Values for an INSERT; unset optional fields fall back to column defaults."""
        return {key: value for key, value in self.model_dump().items() if value is not None}


class UpdateSchema(BaseSchema):
    """Base for partial updates: every field optional, only sent fields are written."""

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def ensure_date_order(start: Optional[date], end: Optional[date], label: str = "end date") -> None:
    if start and end and end < start:
        raise ValueError(f"{label} must not be before start date")
