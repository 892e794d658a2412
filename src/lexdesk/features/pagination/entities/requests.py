"""Pagination request entities and list filters."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum

from ....config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....core.exceptions import ValidationError


class SortOrder(str, Enum):
    """Sort order enumeration."""
    ASC = "asc"
    DESC = "desc"

    def to_sql(self) -> str:
        return "ASC" if self == SortOrder.ASC else "DESC"


@dataclass(frozen=True)
class SortField:
    """Sort field specification."""

    field: str
    order: SortOrder = SortOrder.DESC

    def __post_init__(self):
        """Only plain column names may reach ORDER BY."""
        if not self.field or not self.field.replace("_", "").isalnum():
            raise ValidationError(
                f"Invalid sort field: {self.field}",
                field_errors=[{"field": "sort", "message": "invalid column name"}],
            )

    def to_sql(self) -> str:
        return f"{self.field} {self.order.to_sql()}"


# Newest first, id as tie-breaker so pages never overlap
DEFAULT_SORT: Tuple[SortField, ...] = (SortField("created_at"), SortField("id"))


@dataclass(frozen=True)
class OffsetPaginationRequest:
    """Offset-based pagination request (page/per_page)."""

    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    max_per_page: int = MAX_PAGE_SIZE

    def __post_init__(self):
        errors = []
        if self.page < 1:
            errors.append({"field": "page", "message": "must be >= 1"})
        if self.per_page < 1 or self.per_page > self.max_per_page:
            errors.append({"field": "limit", "message": f"must be between 1 and {self.max_per_page}"})
        if errors:
            raise ValidationError("Invalid pagination parameters", field_errors=errors)

    @property
    def offset(self) -> int:
        """Calculate offset from page and per_page."""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page

    def next(self) -> "OffsetPaginationRequest":
        return OffsetPaginationRequest(self.page + 1, self.per_page, self.max_per_page)


@dataclass(frozen=True)
class ListFilters:
    """Filters accepted by module list operations, combined with AND.

    ``search`` matches case-insensitively against the module's search
    columns; ``tags`` matches rows having any of the given tags.
    ``extra`` holds module specific equality filters (column -> value).
    """

    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (
            self.status or self.priority or self.search or self.tags
            or self.date_from or self.date_to or self.extra
        )
