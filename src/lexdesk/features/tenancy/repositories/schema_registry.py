"""Tenant schema registry.

Maps a tenant id to its schema name (from the admin ``tenants`` table) and
answers whether that schema exists. Existence is memoized per schema name:
names are immutable, and the memo is invalidated explicitly when a schema
is dropped.
"""

import logging
from typing import List, Optional, Set

from ....config.constants import DatabaseSchemas
from ....core.exceptions import InvalidSchemaError, StoreError, TenantNotInitializedError
from ....database.error_handling import database_error_handler
from ....database.protocols import Store
from ..entities.tenant import SchemaState, TenantSchema
from ..utils.queries import TENANT_SCHEMA_LOOKUP
from ..utils.templates import SchemaTemplateExpander, expand
from ..utils.validation import derive_schema_name

logger = logging.getLogger(__name__)


class TenantSchemaRegistry:
    """Resolves tenants to schemas."""

    def __init__(
        self,
        store: Store,
        admin_schema: str = DatabaseSchemas.ADMIN,
        tenant_prefix: str = DatabaseSchemas.TENANT_PREFIX,
    ):
        self._store = store
        self._admin_schema = admin_schema
        self._tenant_prefix = tenant_prefix
        self._expander = SchemaTemplateExpander(required_prefix=tenant_prefix)
        self._verified: Set[str] = set()

    @property
    def admin_schema(self) -> str:
        return self._admin_schema

    @property
    def tenant_prefix(self) -> str:
        return self._tenant_prefix

    def admin_query(self, template: str) -> str:
        """Expand an admin-table template against the admin schema."""
        return expand(template, self._admin_schema)

    def derive_schema_name(self, tenant_id: str) -> str:
        return derive_schema_name(tenant_id, self._tenant_prefix)

    @database_error_handler("look up tenant schema")
    async def _lookup(self, tenant_id: str) -> Optional[dict]:
        row = await self._store.fetchrow(self.admin_query(TENANT_SCHEMA_LOOKUP), tenant_id)
        return dict(row) if row else None

    async def get_schema_name(self, tenant_id: str) -> str:
        """Schema name recorded for the tenant.

        Raises:
            TenantNotInitializedError: no tenant row exists
            StoreError: the stored name is not a valid tenant schema
        """
        row = await self._lookup(tenant_id)
        if row is None:
            raise TenantNotInitializedError(tenant_id, "no tenant record")
        return self._stored_schema_name(tenant_id, row)

    def _stored_schema_name(self, tenant_id: str, row: dict) -> str:
        try:
            return self._expander.validate(row["schema_name"])
        except InvalidSchemaError as e:
            # Corrupt admin data, not caller input
            logger.error(f"Tenant {tenant_id} has an invalid stored schema name: {e.message}")
            raise StoreError("Tenant record is inconsistent", details={"tenant_id": tenant_id}) from e

    async def resolve(self, tenant_id: str) -> TenantSchema:
        """Resolve routing information and provisioning state for a tenant."""
        row = await self._lookup(tenant_id)
        if row is None:
            raise TenantNotInitializedError(tenant_id, "no tenant record")

        schema_name = self._stored_schema_name(tenant_id, row)
        exists = await self.schema_exists(schema_name)
        return TenantSchema(
            tenant_id=tenant_id,
            schema_name=schema_name,
            is_active=bool(row["is_active"]),
            state=SchemaState.PROVISIONED if exists else SchemaState.NOT_PROVISIONED,
        )

    async def schema_exists(self, schema_name: str) -> bool:
        if schema_name in self._verified:
            return True
        exists = await self._store.schema_exists(schema_name)
        if exists:
            self._verified.add(schema_name)
        return exists

    async def list_tables(self, schema_name: str) -> List[str]:
        return await self._store.list_tables(schema_name)

    def mark_provisioned(self, schema_name: str) -> None:
        self._verified.add(schema_name)

    def forget(self, schema_name: str) -> None:
        """Drop the memo entry; call after the schema is dropped."""
        self._verified.discard(schema_name)
        logger.debug(f"Forgot verified schema {schema_name}")
