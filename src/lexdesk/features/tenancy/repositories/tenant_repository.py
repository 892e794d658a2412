"""Tenant repository over the admin ``tenants`` table."""

import logging
from typing import Dict, Optional

import asyncpg

from ....config.constants import AccountType
from ....core.exceptions import ConflictError, TenantNotFoundError
from ....database.error_handling import STORE_FAILURES, database_error_handler, to_store_error
from ....database.protocols import Store
from ...pagination import OffsetPaginationRequest, OffsetPaginationResponse
from ..entities.tenant import Tenant
from ..utils.queries import (
    TENANT_COUNT,
    TENANT_DELETE,
    TENANT_GET_BY_ID,
    TENANT_INSERT,
    TENANT_LIST,
    TENANT_MODULE_COUNTS,
    TENANT_SET_ACTIVE,
    TENANT_STATUS_COUNTS,
)
from ..utils.templates import SchemaTemplateExpander
from .schema_registry import TenantSchemaRegistry

logger = logging.getLogger(__name__)

MODULE_COUNT_KEYS = ("clients", "projects", "tasks", "transactions", "invoices")


class TenantRepository:
    """CRUD for tenant rows. Schema work belongs to the provisioner."""

    def __init__(self, store: Store, registry: TenantSchemaRegistry):
        self._store = store
        self._registry = registry
        self._expander = SchemaTemplateExpander(registry.tenant_prefix)

    def _q(self, template: str) -> str:
        return self._registry.admin_query(template)

    async def create(
        self,
        tenant_id: str,
        name: str,
        schema_name: str,
        plan_type: AccountType = AccountType.SIMPLES,
        max_users: int = 5,
        max_storage_mb: int = 1024,
    ) -> Tenant:
        try:
            row = await self._insert(tenant_id, name, schema_name, plan_type, max_users, max_storage_mb)
        except asyncpg.UniqueViolationError as e:
            raise ConflictError(
                f"Tenant '{tenant_id}' already exists",
                details={"tenant_id": tenant_id, "schema_name": schema_name},
            ) from e
        except STORE_FAILURES as e:
            logger.error(f"Failed to create tenant {tenant_id}: {e!r}")
            raise to_store_error(e, "create tenant") from e
        logger.info(f"Created tenant row {tenant_id} ({schema_name})")
        return Tenant.from_row(dict(row))

    async def _insert(self, tenant_id, name, schema_name, plan_type, max_users, max_storage_mb):
        return await self._store.fetchrow(
            self._q(TENANT_INSERT),
            tenant_id,
            name,
            schema_name,
            AccountType(plan_type).value,
            max_users,
            max_storage_mb,
        )

    @database_error_handler("get tenant")
    async def find(self, tenant_id: str) -> Optional[Tenant]:
        row = await self._store.fetchrow(self._q(TENANT_GET_BY_ID), tenant_id)
        return Tenant.from_row(dict(row)) if row else None

    async def get(self, tenant_id: str) -> Tenant:
        tenant = await self.find(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    @database_error_handler("update tenant status")
    async def set_active(self, tenant_id: str, is_active: bool) -> Tenant:
        row = await self._store.fetchrow(self._q(TENANT_SET_ACTIVE), tenant_id, is_active)
        if row is None:
            raise TenantNotFoundError(tenant_id)
        return Tenant.from_row(dict(row))

    @database_error_handler("delete tenant")
    async def delete(self, tenant_id: str) -> bool:
        status = await self._store.execute(self._q(TENANT_DELETE), tenant_id)
        return status.endswith(" 1")

    @database_error_handler("list tenants")
    async def list(self, pagination: OffsetPaginationRequest) -> OffsetPaginationResponse[Tenant]:
        total = await self._store.fetchval(self._q(TENANT_COUNT))
        rows = await self._store.fetch(self._q(TENANT_LIST), pagination.limit, pagination.offset)
        return OffsetPaginationResponse(
            items=[Tenant.from_row(dict(row)) for row in rows],
            total=int(total or 0),
            page=pagination.page,
            per_page=pagination.per_page,
        )

    @database_error_handler("count tenants")
    async def status_counts(self) -> Dict[str, int]:
        row = await self._store.fetchrow(self._q(TENANT_STATUS_COUNTS)) or {}
        return {"total": int(row.get("total") or 0), "active": int(row.get("active") or 0)}

    @database_error_handler("count tenant records", log_level=logging.WARNING)
    async def module_counts(self, schema_name: str) -> Dict[str, int]:
        """Active record counts in one tenant schema, read directly from the store.

        Raises:
            InvalidSchemaError: stored schema name is not a tenant schema
            StoreError: schema or one of its tables is missing
        """
        row = await self._store.fetchrow(self._expander.expand(TENANT_MODULE_COUNTS, schema_name)) or {}
        return {key: int(row.get(key) or 0) for key in MODULE_COUNT_KEYS}
