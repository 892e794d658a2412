"""Tests for the dashboard aggregator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lexdesk.config.constants import AccountType
from lexdesk.core.exceptions import TenantInactiveError, TenantNotInitializedError, ValidationError
from lexdesk.features.clients.repositories.client_repository import ClientRepository
from lexdesk.features.dashboard.services.dashboard_service import DashboardService
from lexdesk.features.invoices.repositories.invoice_repository import InvoiceRepository
from lexdesk.features.projects.repositories.project_repository import ProjectRepository
from lexdesk.features.publications.repositories.publication_repository import PublicationRepository
from lexdesk.features.tasks.repositories.task_repository import TaskRepository
from lexdesk.features.transactions.repositories.transaction_repository import TransactionRepository


def _dashboard(executor):
    return DashboardService(
        executor,
        ClientRepository(executor),
        ProjectRepository(executor),
        TaskRepository(executor),
        TransactionRepository(executor),
        InvoiceRepository(executor),
        PublicationRepository(executor),
    )


@pytest.fixture
def dashboard(executor):
    return _dashboard(executor)


class TestMetrics:

    @pytest.mark.asyncio
    async def test_empty_tenant_has_zeroed_metrics(self, store, provisioner, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")

        metrics = await dashboard.get_metrics("acme", "user_1", AccountType.SIMPLES)

        assert metrics.clients["total"] == 0
        assert set(metrics.clients) == set(ClientRepository.STATS_DEFAULTS)
        assert set(metrics.publications) == set(PublicationRepository.STATS_DEFAULTS)
        assert metrics.financial is None
        assert metrics.degraded_modules == []

    @pytest.mark.asyncio
    async def test_financial_metrics_are_tier_gated(self, store, provisioner, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")

        simples = await dashboard.get_metrics("acme", "user_1", AccountType.SIMPLES)
        assert simples.financial is None
        assert not [q for q in store.executed if "SUM(amount)" in q]

        gerencial = await dashboard.get_metrics("acme", "user_1", AccountType.GERENCIAL)

        assert set(gerencial.financial) == {"transactions", "invoices"}
        assert set(gerencial.financial["transactions"]) == set(TransactionRepository.STATS_DEFAULTS)

    @pytest.mark.asyncio
    async def test_one_failing_module_degrades_to_defaults(self, store, provisioner, executor, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        await ClientRepository(executor).create("acme", {"name": "Alice"})
        store.fail_when('"tenant_acme".tasks', ConnectionResetError("connection reset"))

        metrics = await dashboard.get_metrics("acme", "user_1", AccountType.COMPOSTA)

        assert metrics.degraded_modules == ["tasks"]
        assert metrics.tasks == TaskRepository.STATS_DEFAULTS
        assert metrics.clients["total"] == 1
        assert metrics.to_dict()["degraded_modules"] == ["tasks"]

    @pytest.mark.asyncio
    async def test_never_provisioned_tenant_strict(self, store, dashboard):
        store.add_tenant("acme")

        with pytest.raises(TenantNotInitializedError):
            await dashboard.get_metrics("acme", "user_1", AccountType.GERENCIAL)

    @pytest.mark.asyncio
    async def test_never_provisioned_tenant_lazy(self, store, lazy_executor):
        store.add_tenant("acme")

        metrics = await _dashboard(lazy_executor).get_metrics("acme", "user_1", AccountType.GERENCIAL)

        assert metrics.clients["total"] == 0
        assert metrics.degraded_modules == []
        assert "tenant_acme" in store.schemas

    @pytest.mark.asyncio
    async def test_missing_table_is_not_degraded(self, store, provisioner, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        store.tables["tenant_acme"].discard("tasks")

        with pytest.raises(TenantNotInitializedError):
            await dashboard.get_metrics("acme", "user_1")

    @pytest.mark.asyncio
    async def test_missing_table_is_repaired_under_lazy(self, store, provisioner, lazy_executor):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        store.tables["tenant_acme"].discard("tasks")

        metrics = await _dashboard(lazy_executor).get_metrics("acme", "user_1")

        assert metrics.degraded_modules == []
        assert metrics.tasks == TaskRepository.STATS_DEFAULTS
        assert "tasks" in store.tables["tenant_acme"]

    @pytest.mark.asyncio
    async def test_inactive_tenant(self, store, provisioner, dashboard):
        store.add_tenant("acme", is_active=False)

        with pytest.raises(TenantInactiveError):
            await dashboard.get_metrics("acme", "user_1")

    @pytest.mark.asyncio
    async def test_without_user_publications_are_zero(self, store, provisioner, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")

        metrics = await dashboard.get_metrics("acme", None)

        assert metrics.publications == PublicationRepository.STATS_DEFAULTS
        assert metrics.degraded_modules == []


class TestRecentActivity:

    @pytest.mark.asyncio
    async def test_merges_modules_newest_first(self, store, provisioner, executor, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        await ClientRepository(executor).create("acme", {"name": "Alice"})
        await ProjectRepository(executor).create("acme", {"title": "Inventário", "budget": "1500.00"}, created_by="u1")
        await TaskRepository(executor).create("acme", {"title": "Protocolar petição", "assigned_to": "u1"}, created_by="u1")

        activity = await dashboard.get_recent_activity("acme", limit=2)

        assert [item.type for item in activity] == ["task", "project"]
        assert activity[1].amount == 1500.0
        assert activity[0].to_dict()["date"].startswith("2024-01-01")

    @pytest.mark.asyncio
    async def test_activity_is_tenant_wide(self, store, provisioner, executor, dashboard):
        store.add_tenant("acme")
        await provisioner.provision("acme")
        await ProjectRepository(executor).create("acme", {"title": "Inventário"}, created_by="u1")
        await ProjectRepository(executor).create("acme", {"title": "Divórcio"}, created_by="u2")

        store.executed.clear()
        activity = await dashboard.get_recent_activity("acme")

        assert {item.title for item in activity} == {"Project: Inventário", "Project: Divórcio"}
        assert not any("created_by =" in query or "assigned_to =" in query for query in store.executed)

    @pytest.mark.asyncio
    async def test_invalid_limit(self, dashboard):
        with pytest.raises(ValidationError):
            await dashboard.get_recent_activity("acme", limit=0)


class TestChartData:

    @pytest.fixture
    def repositories(self):
        repos = {}
        for name in ("clients", "projects", "tasks", "transactions", "invoices", "publications"):
            repos[name] = MagicMock()
        repos["projects"].status_breakdown = AsyncMock(return_value=[{"status": "won", "count": 2}])
        repos["tasks"].status_breakdown = AsyncMock(side_effect=ConnectionResetError("reset"))
        repos["transactions"].by_category = AsyncMock(return_value=[{"category": "Fees", "total": 10.0}])
        repos["transactions"].cash_flow = AsyncMock(return_value=[])
        return repos

    @pytest.fixture
    def service(self, mock_executor, repositories):
        return DashboardService(
            mock_executor,
            repositories["clients"],
            repositories["projects"],
            repositories["tasks"],
            repositories["transactions"],
            repositories["invoices"],
            repositories["publications"],
        )

    @pytest.mark.asyncio
    async def test_series_degrade_to_empty(self, service):
        charts = await service.get_chart_data("acme", AccountType.GERENCIAL, period_days=7)

        assert charts.projects == [{"status": "won", "count": 2}]
        assert charts.tasks == []
        assert charts.degraded_modules == ["tasks"]
        assert charts.financial["categories"] == [{"category": "Fees", "total": 10.0}]

    @pytest.mark.asyncio
    async def test_simples_has_no_financial_series(self, service, repositories):
        charts = await service.get_chart_data("acme", AccountType.SIMPLES)

        assert charts.financial is None
        repositories["transactions"].cash_flow.assert_not_called()

    @pytest.mark.asyncio
    async def test_period_bounds(self, service):
        with pytest.raises(ValidationError):
            await service.get_chart_data("acme", AccountType.SIMPLES, period_days=0)
