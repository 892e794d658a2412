"""Tests for the schema provisioner."""

from contextlib import asynccontextmanager

import asyncpg
import pytest

from lexdesk.core.exceptions import (
    InvalidSchemaError,
    ProvisioningError,
    TenantNotInitializedError,
    ValidationError,
)
from lexdesk.features.tenancy.utils.schema_definitions import (
    ADMIN_TABLES,
    CLIENTS,
    PUBLICATIONS,
    TENANT_TABLES,
)
from lexdesk.features.tenancy.repositories.schema_registry import TenantSchemaRegistry
from lexdesk.features.tenancy.services.provisioner import SchemaProvisioner

TENANT_TABLE_NAMES = {table.name for table in TENANT_TABLES}


class TestProvision:

    @pytest.mark.asyncio
    async def test_creates_schema_and_every_table(self, store, provisioner):
        store.add_tenant("acme")

        report = await provisioner.provision("acme")

        assert report.schema_created
        assert set(report.tables_created) == TENANT_TABLE_NAMES
        assert report.tables_repaired == []
        assert store.tables["tenant_acme"] == TENANT_TABLE_NAMES

    @pytest.mark.asyncio
    async def test_is_idempotent(self, store, provisioner):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        rows_before = dict(store.rows)

        report = await provisioner.provision("acme")

        assert not report.schema_created
        assert report.tables_created == []
        assert set(report.tables_repaired) == TENANT_TABLE_NAMES
        assert not report.changed
        assert store.rows == rows_before

    @pytest.mark.asyncio
    async def test_repair_creates_only_missing_tables(self, store, provisioner):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        store.tables["tenant_acme"].discard("notifications")

        report = await provisioner.provision("acme")

        assert report.tables_created == ["notifications"]
        assert "notifications" in store.tables["tenant_acme"]

    @pytest.mark.asyncio
    async def test_statements_never_drop_or_rewrite(self, store, provisioner):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        await provisioner.provision("acme")

        ddl = [q.strip() for q in store.executed if q.strip().startswith(("CREATE", "ALTER", "DROP"))]
        assert ddl
        for statement in ddl:
            assert "DROP" not in statement
            assert "IF NOT EXISTS" in statement

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, provisioner):
        with pytest.raises(TenantNotInitializedError):
            await provisioner.provision("ghost")

    @pytest.mark.asyncio
    async def test_failure_is_retryable_provisioning_error(self, store, provisioner):
        store.add_tenant("acme")
        store.fail_when("CREATE TABLE", asyncpg.InsufficientPrivilegeError("permission denied"))

        with pytest.raises(ProvisioningError) as exc_info:
            await provisioner.provision("acme")

        assert exc_info.value.retryable
        assert not provisioner._registry._verified

    @pytest.mark.asyncio
    async def test_invalid_schema_name_is_rejected(self, provisioner):
        with pytest.raises(InvalidSchemaError):
            await provisioner.provision_schema("acme", "public")


class TestTableDefinitions:

    def test_every_table_has_audit_columns(self):
        for table in TENANT_TABLES:
            names = set(table.column_names)
            assert {"id", "is_active", "created_at", "updated_at", "created_by"} <= names, table.name

    def test_create_template_is_schema_qualified(self):
        template = CLIENTS.create_table_template()
        assert template.startswith("CREATE TABLE IF NOT EXISTS {schema}.clients (")
        assert "id VARCHAR PRIMARY KEY" in template

    def test_repair_adds_columns_without_constraints(self):
        repairs = PUBLICATIONS.repair_templates()
        assert all("ADD COLUMN IF NOT EXISTS" in statement for statement in repairs)
        assert not any("NOT NULL" in statement or "CHECK" in statement for statement in repairs)

    def test_table_constraints_are_rendered(self):
        assert "UNIQUE (user_id, external_id)" in PUBLICATIONS.create_table_template()

    def test_index_names_are_table_prefixed(self):
        for statement in CLIENTS.index_templates():
            assert statement.startswith("CREATE INDEX IF NOT EXISTS idx_clients_")


class TestRepairAll:

    @pytest.mark.asyncio
    async def test_collects_failures_without_stopping(self, mock_database_repository):
        mock_database_repository.fetch.return_value = [
            {"id": "good", "schema_name": "tenant_good"},
            {"id": "bad", "schema_name": "bad schema"},
        ]
        mock_database_repository.schema_exists.return_value = False
        registry = TenantSchemaRegistry(mock_database_repository)
        provisioner = SchemaProvisioner(mock_database_repository, registry)
        mock_database_repository.transaction = _transaction(mock_database_repository)

        summary = await provisioner.repair_all()

        assert set(summary.reports) == {"good"}
        assert set(summary.failures) == {"bad"}
        assert not summary.ok


class TestDrop:

    @pytest.mark.asyncio
    async def test_requires_confirmation(self, store, provisioner):
        store.add_tenant("acme")
        await provisioner.provision("acme")

        with pytest.raises(ValidationError):
            await provisioner.drop("acme")

        assert "tenant_acme" in store.schemas

    @pytest.mark.asyncio
    async def test_drop_removes_schema_and_memo(self, store, provisioner, executor):
        store.add_tenant("acme")
        await provisioner.provision("acme")

        dropped = await provisioner.drop("acme", confirm=True)

        assert dropped == "tenant_acme"
        assert "tenant_acme" not in store.schemas
        assert any('DROP SCHEMA IF EXISTS "tenant_acme" CASCADE' in q for q in store.executed)
        with pytest.raises(TenantNotInitializedError):
            await executor.ensure_ready("acme")


class TestBootstrapAdmin:

    @pytest.mark.asyncio
    async def test_creates_admin_tables_in_admin_schema(self, store, provisioner):
        created = await provisioner.bootstrap_admin()

        assert created == [table.name for table in ADMIN_TABLES]
        assert {"tenants", "registration_keys"} <= store.tables["public"]


def _transaction(connection):
    @asynccontextmanager
    async def transaction():
        yield connection

    return transaction
