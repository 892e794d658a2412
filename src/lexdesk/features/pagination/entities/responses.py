"""Pagination response entities."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')
U = TypeVar('U')


@dataclass(frozen=True)
class OffsetPaginationResponse(Generic[T]):
    """Offset-based pagination response with page info."""

    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def count(self) -> int:
        """Number of items in the current page."""
        return len(self.items)

    @property
    def total_pages(self) -> int:
        if self.per_page == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None

    def map(self, func: Callable[[T], U]) -> "OffsetPaginationResponse[U]":
        return OffsetPaginationResponse(
            items=[func(item) for item in self.items],
            total=self.total,
            page=self.page,
            per_page=self.per_page,
        )

    @property
    def page_info(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }
