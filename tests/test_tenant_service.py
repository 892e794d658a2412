"""Tests for tenant administration."""

from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from lexdesk.config.constants import AccountType
from lexdesk.core.exceptions import (
    ConflictError,
    InvalidSchemaError,
    ProvisioningError,
    StoreError,
    TenantNotFoundError,
    ValidationError,
)
from lexdesk.features.pagination import OffsetPaginationRequest, OffsetPaginationResponse
from lexdesk.features.registration_keys.repositories.registration_key_repository import RegistrationKeyRepository
from lexdesk.features.tenancy.entities.tenant import Tenant
from lexdesk.features.tenancy.repositories.schema_registry import TenantSchemaRegistry
from lexdesk.features.tenancy.repositories.tenant_repository import TenantRepository
from lexdesk.features.tenancy.services.provisioner import SchemaProvisioner
from lexdesk.features.tenancy.services.tenant_service import TenantService


def tenant_row(**overrides):
    row = {
        "id": "acme",
        "name": "Acme Advogados",
        "schema_name": "tenant_acme",
        "plan_type": "GERENCIAL",
        "max_users": 10,
        "max_storage_mb": 2048,
        "is_active": True,
    }
    row.update(overrides)
    return row


@pytest.fixture
def tenant_repository():
    repository = MagicMock(spec=TenantRepository)
    repository.create = AsyncMock(return_value=Tenant.from_row(tenant_row()))
    repository.get = AsyncMock(return_value=Tenant.from_row(tenant_row()))
    repository.set_active = AsyncMock(return_value=Tenant.from_row(tenant_row(is_active=False)))
    repository.delete = AsyncMock(return_value=True)
    return repository


@pytest.fixture
def mock_provisioner():
    provisioner = MagicMock(spec=SchemaProvisioner)
    provisioner.provision_schema = AsyncMock()
    provisioner.drop_schema = AsyncMock()
    return provisioner


@pytest.fixture
def tenant_service(tenant_repository, mock_provisioner):
    return TenantService(tenant_repository, mock_provisioner, "tenant_")


class TestCreateTenant:

    @pytest.mark.asyncio
    async def test_creates_row_then_provisions(self, tenant_service, tenant_repository, mock_provisioner):
        tenant = await tenant_service.create_tenant("Acme", "  Acme Advogados ", AccountType.GERENCIAL)

        assert tenant.schema_name == "tenant_acme"
        kwargs = tenant_repository.create.call_args.kwargs
        assert kwargs["schema_name"] == "tenant_acme"
        assert kwargs["name"] == "Acme Advogados"
        mock_provisioner.provision_schema.assert_awaited_once_with("acme", "tenant_acme")

    @pytest.mark.asyncio
    async def test_hyphenated_id_maps_to_underscores(self, tenant_service, tenant_repository):
        await tenant_service.create_tenant("acme-01", "Acme")

        assert tenant_repository.create.call_args.kwargs["schema_name"] == "tenant_acme_01"

    @pytest.mark.asyncio
    async def test_collects_all_field_errors(self, tenant_service, tenant_repository):
        with pytest.raises(ValidationError) as exc_info:
            await tenant_service.create_tenant("acme; DROP", "")

        fields = {error["field"] for error in exc_info.value.field_errors}
        assert fields == {"tenant_id", "name"}
        tenant_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_too_long_id(self, tenant_service):
        with pytest.raises(ValidationError):
            await tenant_service.create_tenant("a" * 60, "Acme")

    @pytest.mark.asyncio
    async def test_provisioning_failure_propagates(self, tenant_service, mock_provisioner):
        mock_provisioner.provision_schema.side_effect = ProvisioningError("acme", "disk full")

        with pytest.raises(ProvisioningError):
            await tenant_service.create_tenant("acme", "Acme")


class TestTenantLifecycle:

    @pytest.mark.asyncio
    async def test_deactivate(self, tenant_service, tenant_repository):
        tenant = await tenant_service.deactivate_tenant("acme")

        assert tenant.is_active is False
        tenant_repository.set_active.assert_awaited_once_with("acme", False)

    @pytest.mark.asyncio
    async def test_delete_requires_confirmation(self, tenant_service, mock_provisioner):
        with pytest.raises(ValidationError):
            await tenant_service.delete_tenant("acme")
        mock_provisioner.drop_schema.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_drops_schema_then_row(self, tenant_service, tenant_repository, mock_provisioner):
        await tenant_service.delete_tenant("acme", confirm=True)

        mock_provisioner.drop_schema.assert_awaited_once_with("tenant_acme")
        tenant_repository.delete.assert_awaited_once_with("acme")

    @pytest.mark.asyncio
    async def test_list_defaults_to_first_page(self, tenant_service, tenant_repository):
        tenant_repository.list = AsyncMock()

        await tenant_service.list_tenants()

        pagination = tenant_repository.list.call_args[0][0]
        assert pagination.page == 1


class TestTenantRepository:

    @pytest.fixture
    def repository(self, mock_database_repository):
        return TenantRepository(mock_database_repository, TenantSchemaRegistry(mock_database_repository))

    @pytest.mark.asyncio
    async def test_duplicate_tenant_is_conflict(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(ConflictError):
            await repository.create("acme", "Acme", "tenant_acme")

    @pytest.mark.asyncio
    async def test_connection_failure_is_store_error(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.side_effect = ConnectionRefusedError()

        with pytest.raises(StoreError):
            await repository.create("acme", "Acme", "tenant_acme")

    @pytest.mark.asyncio
    async def test_get_missing_tenant(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = None

        with pytest.raises(TenantNotFoundError):
            await repository.get("ghost")

    @pytest.mark.asyncio
    async def test_list_pages(self, repository, mock_database_repository):
        mock_database_repository.fetchval.return_value = 3
        mock_database_repository.fetch.return_value = [tenant_row()]

        page = await repository.list(OffsetPaginationRequest(page=2, per_page=2))

        assert page.total == 3
        assert page.items[0].plan_type == AccountType.GERENCIAL
        assert mock_database_repository.fetch.call_args[0][1:] == (2, 2)
        assert '"public".tenants' in mock_database_repository.fetch.call_args[0][0]

    @pytest.mark.asyncio
    async def test_module_counts_read_tenant_schema(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = {
            "clients": 3, "projects": 1, "tasks": None, "transactions": 2, "invoices": 0,
        }

        counts = await repository.module_counts("tenant_acme")

        sql = mock_database_repository.fetchrow.call_args[0][0]
        assert counts == {"clients": 3, "projects": 1, "tasks": 0, "transactions": 2, "invoices": 0}
        assert '"tenant_acme".clients' in sql
        assert '"tenant_acme".invoices' in sql
        assert sql.count("is_active = TRUE") == 5

    @pytest.mark.asyncio
    async def test_module_counts_missing_schema_is_store_error(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.side_effect = asyncpg.InvalidSchemaNameError('schema "tenant_ghost" does not exist')

        with pytest.raises(StoreError):
            await repository.module_counts("tenant_ghost")

    @pytest.mark.asyncio
    async def test_module_counts_refuse_non_tenant_schema(self, repository, mock_database_repository):
        with pytest.raises(InvalidSchemaError):
            await repository.module_counts("public")
        mock_database_repository.fetchrow.assert_not_called()

    @pytest.mark.asyncio
    async def test_status_counts(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = {"total": 5, "active": 3}

        assert await repository.status_counts() == {"total": 5, "active": 3}
        assert "FILTER (WHERE is_active = TRUE)" in mock_database_repository.fetchrow.call_args[0][0]


def _page(*tenants, total=None):
    return OffsetPaginationResponse(
        items=list(tenants),
        total=len(tenants) if total is None else total,
        page=1,
        per_page=50,
    )


class TestTenantStatistics:

    @pytest.mark.asyncio
    async def test_lists_counts_per_tenant(self, tenant_service, tenant_repository):
        counts = {"clients": 4, "projects": 2, "tasks": 7, "transactions": 1, "invoices": 0}
        tenant_repository.list = AsyncMock(return_value=_page(Tenant.from_row(tenant_row()), total=12))
        tenant_repository.module_counts = AsyncMock(return_value=counts)

        page = await tenant_service.list_tenants_with_stats()

        assert page.total == 12
        summary = page.items[0]
        assert summary.counts == counts
        assert summary.stats_available
        assert summary.to_dict()["stats"]["tasks"] == 7
        tenant_repository.module_counts.assert_awaited_once_with("tenant_acme")

    @pytest.mark.asyncio
    async def test_broken_tenant_is_zeroed_without_failing_the_listing(self, tenant_service, tenant_repository):
        healthy = Tenant.from_row(tenant_row())
        missing = Tenant.from_row(tenant_row(id="ghost", schema_name="tenant_ghost"))
        corrupt = Tenant.from_row(tenant_row(id="bad", schema_name="public"))
        counts = {"clients": 1, "projects": 0, "tasks": 0, "transactions": 0, "invoices": 0}
        tenant_repository.list = AsyncMock(return_value=_page(healthy, missing, corrupt))
        tenant_repository.module_counts = AsyncMock(side_effect=[
            counts,
            StoreError("Database operation failed: count tenant records"),
            InvalidSchemaError("public", "must start with 'tenant_'"),
        ])

        page = await tenant_service.list_tenants_with_stats()

        assert [summary.stats_available for summary in page.items] == [True, False, False]
        assert page.items[1].counts == {"clients": 0, "projects": 0, "tasks": 0, "transactions": 0, "invoices": 0}
        assert page.items[2].to_dict()["stats"]["invoices"] == 0

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self, tenant_service, tenant_repository):
        tenant_repository.list = AsyncMock(side_effect=StoreError("Database operation failed: list tenants"))

        with pytest.raises(StoreError):
            await tenant_service.list_tenants_with_stats()


class TestGlobalMetrics:

    @pytest.fixture
    def key_repository(self):
        repository = MagicMock(spec=RegistrationKeyRepository)
        repository.count_by_account_type = AsyncMock(return_value={"GERENCIAL": 1, "SIMPLES": 3})
        return repository

    @pytest.mark.asyncio
    async def test_totals_keys_and_recent_tenants(self, tenant_repository, mock_provisioner, key_repository):
        tenant_repository.status_counts = AsyncMock(return_value={"total": 5, "active": 4})
        tenant_repository.list = AsyncMock(return_value=_page(Tenant.from_row(tenant_row()), total=5))
        service = TenantService(tenant_repository, mock_provisioner, "tenant_", registration_keys=key_repository)

        metrics = await service.global_metrics()

        body = metrics.to_dict()
        assert body["tenants"] == {"total": 5, "active": 4, "inactive": 1}
        assert body["registration_keys"] == [
            {"account_type": "GERENCIAL", "count": 1},
            {"account_type": "SIMPLES", "count": 3},
        ]
        assert [tenant["id"] for tenant in body["recent_tenants"]] == ["acme"]
        assert tenant_repository.list.call_args[0][0].per_page == 3

    @pytest.mark.asyncio
    async def test_without_key_repository(self, tenant_service, tenant_repository):
        tenant_repository.status_counts = AsyncMock(return_value={"total": 0, "active": 0})
        tenant_repository.list = AsyncMock(return_value=_page())

        metrics = await tenant_service.global_metrics()

        assert metrics.registration_keys == {}
        assert metrics.inactive_tenants == 0
