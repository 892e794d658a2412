"""Tenancy services."""

from .query_executor import TenantQueryExecutor
from .provisioner import SchemaProvisioner
from .tenant_service import TenantService

__all__ = ["TenantQueryExecutor", "SchemaProvisioner", "TenantService"]
