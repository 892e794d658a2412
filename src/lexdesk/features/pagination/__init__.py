"""Offset pagination and list filters."""

from .entities.requests import SortOrder, SortField, OffsetPaginationRequest, ListFilters
from .entities.responses import OffsetPaginationResponse

__all__ = [
    "SortOrder",
    "SortField",
    "OffsetPaginationRequest",
    "ListFilters",
    "OffsetPaginationResponse",
]
