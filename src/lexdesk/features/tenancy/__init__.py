"""Tenant isolation: schema registry, template expansion, query executor and provisioner."""

from .entities import (
    Tenant,
    TenantSchema,
    TenantContext,
    SchemaState,
    ProvisioningPolicy,
    ProvisioningReport,
    RepairSummary,
)
from .repositories import TenantSchemaRegistry, TenantRepository
from .services import TenantQueryExecutor, SchemaProvisioner, TenantService
from .utils.templates import SCHEMA_PLACEHOLDER, SchemaTemplateExpander, expand, validate_schema_identifier

__all__ = [
    "Tenant",
    "TenantSchema",
    "TenantContext",
    "SchemaState",
    "ProvisioningPolicy",
    "ProvisioningReport",
    "RepairSummary",
    "TenantSchemaRegistry",
    "TenantRepository",
    "TenantQueryExecutor",
    "SchemaProvisioner",
    "TenantService",
    "SCHEMA_PLACEHOLDER",
    "SchemaTemplateExpander",
    "expand",
    "validate_schema_identifier",
]
