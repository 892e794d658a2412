"""Schema provisioner.

Creates a tenant schema and the canonical table set, and repairs schemas
created by older versions by adding missing columns. Every statement is
``IF NOT EXISTS``, so provisioning is safe to repeat and never rewrites or
drops data. One provisioning run executes inside a single transaction.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ....core.exceptions import (
    ProvisioningError,
    StoreError,
    ValidationError,
)
from ....database.error_handling import STORE_FAILURES, database_error_handler
from ....database.protocols import Store
from ..entities.tenant import ProvisioningReport, RepairSummary
from ..repositories.schema_registry import TenantSchemaRegistry
from ..utils.queries import TENANT_LIST_ACTIVE
from ..utils.schema_definitions import ADMIN_TABLES, TENANT_TABLES, TableDefinition
from ..utils.templates import SchemaTemplateExpander, expand

logger = logging.getLogger(__name__)

CREATE_SCHEMA = "CREATE SCHEMA IF NOT EXISTS {schema}"
DROP_SCHEMA = "DROP SCHEMA IF EXISTS {schema} CASCADE"


class SchemaProvisioner:
    """Creates, repairs and drops tenant schemas."""

    def __init__(
        self,
        store: Store,
        registry: TenantSchemaRegistry,
        tables: Tuple[TableDefinition, ...] = TENANT_TABLES,
        admin_tables: Tuple[TableDefinition, ...] = ADMIN_TABLES,
    ):
        self._store = store
        self._registry = registry
        self._tables = tables
        self._admin_tables = admin_tables
        self._expander = SchemaTemplateExpander(registry.tenant_prefix)

    @property
    def tables(self) -> Tuple[TableDefinition, ...]:
        return self._tables

    async def provision(self, tenant_id: str) -> ProvisioningReport:
        """Bring the tenant's schema up to the canonical table set.

        Raises:
            TenantNotInitializedError: no tenant row exists
            ProvisioningError: DDL failed; retrying is safe
        """
        schema_name = await self._registry.get_schema_name(tenant_id)
        return await self.provision_schema(tenant_id, schema_name)

    async def provision_schema(self, tenant_id: str, schema_name: str) -> ProvisioningReport:
        schema_name = self._expander.validate(schema_name)
        report = ProvisioningReport(tenant_id=tenant_id, schema_name=schema_name)

        try:
            existed = await self._store.schema_exists(schema_name)
            existing_tables = set(await self._store.list_tables(schema_name)) if existed else set()

            statements: List[str] = [CREATE_SCHEMA]
            for table in self._tables:
                if table.name in existing_tables:
                    statements.extend(table.repair_templates())
                    report.tables_repaired.append(table.name)
                else:
                    statements.append(table.create_table_template())
                    report.tables_created.append(table.name)
                statements.extend(table.index_templates())

            async with self._store.transaction() as connection:
                for template in statements:
                    await connection.execute(self._expander.expand(template, schema_name))

        except (StoreError,) + STORE_FAILURES as e:
            logger.error(f"Provisioning schema {schema_name} for tenant {tenant_id} failed: {e!r}")
            raise ProvisioningError(tenant_id, type(e).__name__) from e

        report.schema_created = not existed
        report.statements_executed = len(statements)
        self._registry.mark_provisioned(schema_name)

        if report.changed:
            logger.info(
                f"Provisioned {schema_name}: schema_created={report.schema_created}, "
                f"tables_created={report.tables_created}"
            )
        else:
            logger.debug(f"Schema {schema_name} already up to date")
        return report

    async def repair_all(self) -> RepairSummary:
        """Provision every active tenant, collecting failures instead of stopping."""
        summary = RepairSummary()
        for tenant_id, schema_name in await self._active_tenants():
            try:
                summary.reports[tenant_id] = await self.provision_schema(tenant_id, schema_name)
            except (ProvisioningError, ValidationError) as e:
                logger.warning(f"Repair of tenant {tenant_id} failed: {e.message}")
                summary.failures[tenant_id] = e.message

        logger.info(
            f"Repaired {len(summary.reports)} tenant schemas, {len(summary.failures)} failures"
        )
        return summary

    @database_error_handler("list active tenants")
    async def _active_tenants(self) -> Iterable[Tuple[str, str]]:
        rows = await self._store.fetch(self._registry.admin_query(TENANT_LIST_ACTIVE))
        return [(str(row["id"]), row["schema_name"]) for row in rows]

    async def drop(self, tenant_id: str, *, confirm: bool = False) -> str:
        """Drop the tenant schema and everything in it.

        Raises:
            ValidationError: ``confirm`` was not set
        """
        if not confirm:
            raise ValidationError(
                "Dropping a tenant schema destroys all its data; pass confirm=True",
                field_errors=[{"field": "confirm", "message": "must be true"}],
            )
        schema_name = await self._registry.get_schema_name(tenant_id)
        await self.drop_schema(schema_name)
        return schema_name

    async def drop_schema(self, schema_name: str) -> None:
        schema_name = self._expander.validate(schema_name)
        try:
            await self._store.execute(self._expander.expand(DROP_SCHEMA, schema_name))
        except STORE_FAILURES as e:
            logger.error(f"Dropping schema {schema_name} failed: {e!r}")
            raise StoreError("Failed to drop tenant schema", details={"schema_name": schema_name}) from e
        finally:
            self._registry.forget(schema_name)
        logger.warning(f"Dropped schema {schema_name}")

    async def bootstrap_admin(self, admin_schema: Optional[str] = None) -> List[str]:
        """Create the admin tables (tenants, registration keys) if missing."""
        schema_name = admin_schema or self._registry.admin_schema
        statements: List[str] = [CREATE_SCHEMA]
        for table in self._admin_tables:
            statements.append(table.create_table_template())
            statements.extend(table.repair_templates())
            statements.extend(table.index_templates())

        try:
            async with self._store.transaction() as connection:
                for template in statements:
                    await connection.execute(expand(template, schema_name))
        except STORE_FAILURES as e:
            logger.error(f"Bootstrapping admin schema {schema_name} failed: {e!r}")
            raise ProvisioningError("admin", type(e).__name__) from e

        logger.info(f"Admin tables ready in schema {schema_name}")
        return [table.name for table in self._admin_tables]
