"""Repository base classes."""

from .base import RecordState, TenantScopedRepository, WhereBuilder, generate_record_id

__all__ = ["RecordState", "TenantScopedRepository", "WhereBuilder", "generate_record_id"]
