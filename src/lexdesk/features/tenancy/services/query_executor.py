"""Tenant-scoped query executor.

Single entry point for tenant data access. For every call it resolves the
tenant, makes sure the schema is there (or provisions it under the LAZY
policy), expands the ``{schema}`` template and runs it with positional
parameters. Values are always bound, never interpolated. Under LAZY, a
statement that hits a missing table repairs the schema and is retried once.

The executor keeps no per-call state, so concurrent calls for different
tenants on the same instance cannot see each other's schema.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

import asyncpg

from ....core.exceptions import (
    ConflictError,
    LexdeskError,
    TenantInactiveError,
    TenantNotInitializedError,
)
from ....database.error_handling import (
    STORE_FAILURES,
    format_database_error,
    to_store_error,
)
from ....database.protocols import Store
from ....database.utils import process_database_record
from ..entities.tenant import ProvisioningPolicy, TenantSchema
from ..repositories.schema_registry import TenantSchemaRegistry
from ..utils.templates import SchemaTemplateExpander

if TYPE_CHECKING:
    from .provisioner import SchemaProvisioner

logger = logging.getLogger(__name__)

# Raised by PostgreSQL when the schema or a table inside it is missing
MISSING_OBJECT_ERRORS = (
    asyncpg.InvalidSchemaNameError,
    asyncpg.UndefinedTableError,
)


class TenantQueryExecutor:
    """Runs ``{schema}`` templates inside a tenant's schema."""

    def __init__(
        self,
        store: Store,
        registry: TenantSchemaRegistry,
        provisioner: Optional["SchemaProvisioner"] = None,
        policy: ProvisioningPolicy = ProvisioningPolicy.STRICT,
        expander: Optional[SchemaTemplateExpander] = None,
    ):
        if policy == ProvisioningPolicy.LAZY and provisioner is None:
            raise ValueError("LAZY provisioning policy requires a provisioner")
        self._store = store
        self._registry = registry
        self._provisioner = provisioner
        self._policy = ProvisioningPolicy(policy)
        self._expander = expander or SchemaTemplateExpander(registry.tenant_prefix)

    @property
    def policy(self) -> ProvisioningPolicy:
        return self._policy

    @property
    def store(self) -> Store:
        return self._store

    async def ensure_ready(self, tenant_id: str) -> TenantSchema:
        """Resolve the tenant and guarantee its schema exists.

        Raises:
            TenantNotInitializedError: no tenant row, or schema missing under STRICT
            TenantInactiveError: the tenant is deactivated
            ProvisioningError: LAZY provisioning failed
        """
        schema = await self._registry.resolve(tenant_id)
        if not schema.is_active:
            raise TenantInactiveError(tenant_id)
        if schema.is_provisioned:
            return schema

        if self._policy == ProvisioningPolicy.STRICT:
            raise TenantNotInitializedError(tenant_id, f"schema {schema.schema_name} does not exist")

        logger.info(f"Lazily provisioning schema {schema.schema_name} for tenant {tenant_id}")
        await self._provisioner.provision(tenant_id)
        return await self._registry.resolve(tenant_id)

    def render(self, schema: TenantSchema, template: str) -> str:
        return self._expander.expand(template, schema.schema_name)

    async def execute(
        self,
        tenant_id: str,
        template: str,
        params: Optional[Sequence[Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Run a query and return its rows as plain dictionaries."""
        rows = await self._run("fetch", tenant_id, template, params)
        return [process_database_record(row) for row in rows]

    async def fetch_one(
        self,
        tenant_id: str,
        template: str,
        params: Optional[Sequence[Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Run a query and return the first row, or None."""
        row = await self._run("fetchrow", tenant_id, template, params)
        return process_database_record(row) if row is not None else None

    async def fetch_value(
        self,
        tenant_id: str,
        template: str,
        params: Optional[Sequence[Any]] = None,
    ) -> Any:
        """Run a query and return the first column of the first row."""
        return await self._run("fetchval", tenant_id, template, params)

    async def run(
        self,
        tenant_id: str,
        template: str,
        params: Optional[Sequence[Any]] = None,
    ) -> str:
        """Run a statement and return the command status (``UPDATE 3``)."""
        return await self._run("execute", tenant_id, template, params)

    async def _run(
        self,
        method: str,
        tenant_id: str,
        template: str,
        params: Optional[Sequence[Any]],
    ) -> Any:
        args = tuple(params or ())
        schema = await self.ensure_ready(tenant_id)
        try:
            return await self._call(method, tenant_id, schema, template, args)
        except TenantNotInitializedError:
            if self._policy != ProvisioningPolicy.LAZY:
                raise

        # Schema exists but tables are missing (older tenant); repair and retry once
        logger.warning(f"[{tenant_id}] repairing schema {schema.schema_name} before retrying {method}")
        await self._provisioner.provision(tenant_id)
        schema = await self.ensure_ready(tenant_id)
        return await self._call(method, tenant_id, schema, template, args)

    async def _call(
        self,
        method: str,
        tenant_id: str,
        schema: TenantSchema,
        template: str,
        args: Tuple[Any, ...],
    ) -> Any:
        query = self.render(schema, template)
        logger.debug(f"[{tenant_id}] {method}: {' '.join(query.split())} | params={len(args)}")

        try:
            return await getattr(self._store, method)(query, *args)
        except LexdeskError:
            raise
        except MISSING_OBJECT_ERRORS as e:
            # Schema dropped behind our back, or a table was never created
            self._registry.forget(schema.schema_name)
            logger.error(f"[{tenant_id}] schema objects missing: {format_database_error(e, query)}")
            raise TenantNotInitializedError(tenant_id, "schema objects are missing") from e
        except asyncpg.UniqueViolationError as e:
            logger.info(f"[{tenant_id}] unique violation: {format_database_error(e)}")
            raise ConflictError(
                "A record with the same unique value already exists",
                details={"constraint": getattr(e, "constraint_name", None)},
            ) from e
        except STORE_FAILURES as e:
            logger.error(f"[{tenant_id}] query failed: {format_database_error(e, query)}")
            raise to_store_error(e, f"{method} in tenant schema") from e
