"""Tenancy repositories."""

from .schema_registry import TenantSchemaRegistry
from .tenant_repository import TenantRepository

__all__ = ["TenantSchemaRegistry", "TenantRepository"]
