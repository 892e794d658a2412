"""Tenancy entities.

A tenant row lives in the admin schema; its data lives in the schema named
by ``schema_name``. The name is derived once from the tenant id and never
changes afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ....config.constants import AccountType


class SchemaState(str, Enum):
    """Whether the tenant schema exists in the catalog."""
    PROVISIONED = "provisioned"
    NOT_PROVISIONED = "not_provisioned"


class ProvisioningPolicy(str, Enum):
    """What the executor does when a tenant schema is missing.

    STRICT raises ``TenantNotInitializedError``; LAZY provisions first.
    """
    STRICT = "strict"
    LAZY = "lazy"


@dataclass
class Tenant:
    """Tenant as stored in the admin ``tenants`` table."""

    id: str
    name: str
    schema_name: str
    plan_type: AccountType = AccountType.SIMPLES
    max_users: int = 5
    max_storage_mb: int = 1024
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Tenant":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            schema_name=row["schema_name"],
            plan_type=AccountType(row.get("plan_type") or AccountType.SIMPLES.value),
            max_users=row.get("max_users") or 0,
            max_storage_mb=row.get("max_storage_mb") or 0,
            is_active=bool(row.get("is_active", True)),
            created_at=row.get("created_at") or datetime.now(timezone.utc),
            updated_at=row.get("updated_at") or datetime.now(timezone.utc),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "schema_name": self.schema_name,
            "plan_type": self.plan_type.value,
            "max_users": self.max_users,
            "max_storage_mb": self.max_storage_mb,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class TenantSchema:
    """Resolved routing information for one tenant."""

    tenant_id: str
    schema_name: str
    is_active: bool
    state: SchemaState

    @property
    def is_provisioned(self) -> bool:
        return self.state == SchemaState.PROVISIONED


@dataclass(frozen=True)
class TenantContext:
    """Identity of the caller, supplied by the authentication layer."""

    tenant_id: str
    user_id: str
    account_type: AccountType = AccountType.SIMPLES


@dataclass
class ProvisioningReport:
    """What a provisioning run changed. Empty lists mean nothing was missing."""

    tenant_id: str
    schema_name: str
    schema_created: bool = False
    tables_created: List[str] = field(default_factory=list)
    tables_repaired: List[str] = field(default_factory=list)
    statements_executed: int = 0

    @property
    def changed(self) -> bool:
        return self.schema_created or bool(self.tables_created)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "schema_name": self.schema_name,
            "schema_created": self.schema_created,
            "tables_created": list(self.tables_created),
            "tables_repaired": list(self.tables_repaired),
            "statements_executed": self.statements_executed,
        }


@dataclass
class RepairSummary:
    """Outcome of repairing every active tenant."""

    reports: Dict[str, ProvisioningReport] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class TenantSummary:
    """A tenant with active record counts per module.

    ``stats_available`` is False when the schema could not be read; the
    counts are then all zero.
    """

    tenant: Tenant
    counts: Dict[str, int] = field(default_factory=dict)
    stats_available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = self.tenant.to_dict()
        data["stats"] = dict(self.counts)
        data["stats_available"] = self.stats_available
        return data


@dataclass
class GlobalMetrics:
    """Platform-wide figures for the admin console."""

    total_tenants: int = 0
    active_tenants: int = 0
    registration_keys: Dict[str, int] = field(default_factory=dict)
    recent_tenants: List[Tenant] = field(default_factory=list)

    @property
    def inactive_tenants(self) -> int:
        return self.total_tenants - self.active_tenants

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenants": {
                "total": self.total_tenants,
                "active": self.active_tenants,
                "inactive": self.inactive_tenants,
            },
            "registration_keys": [
                {"account_type": account_type, "count": count}
                for account_type, count in sorted(self.registration_keys.items())
            ],
            "recent_tenants": [tenant.to_dict() for tenant in self.recent_tenants],
        }
