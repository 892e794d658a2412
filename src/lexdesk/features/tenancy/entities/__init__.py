"""Tenancy entities."""

from .tenant import (
    Tenant,
    TenantSchema,
    TenantContext,
    SchemaState,
    ProvisioningPolicy,
    ProvisioningReport,
    RepairSummary,
    TenantSummary,
    GlobalMetrics,
)

__all__ = [
    "Tenant",
    "TenantSchema",
    "TenantContext",
    "SchemaState",
    "ProvisioningPolicy",
    "ProvisioningReport",
    "RepairSummary",
    "TenantSummary",
    "GlobalMetrics",
]
