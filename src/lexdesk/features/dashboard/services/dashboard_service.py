"""Dashboard aggregation across the module repositories.

The tenant is checked once up front, so an uninitialized or inactive
tenant surfaces as its typed error. After that, module queries run
concurrently and a failing module degrades to zeroed defaults instead of
failing the whole dashboard.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from ....config.constants import AccountType
from ....core.exceptions import TenantNotInitializedError, ValidationError
from ...clients.repositories.client_repository import ClientRepository
from ...invoices.repositories.invoice_repository import InvoiceRepository
from ...projects.repositories.project_repository import ProjectRepository
from ...publications.repositories.publication_repository import PublicationRepository
from ...tasks.repositories.task_repository import TaskRepository
from ...tenancy.services.query_executor import TenantQueryExecutor
from ...transactions.repositories.transaction_repository import TransactionRepository
from ..entities.metrics import ChartData, DashboardMetrics, RecentActivity

logger = logging.getLogger(__name__)

EPOCH = datetime.min.replace(tzinfo=timezone.utc)
MAX_PERIOD_DAYS = 366


class DashboardService:
    """Builds dashboard metrics, recent activity and chart series."""

    def __init__(
        self,
        executor: TenantQueryExecutor,
        clients: ClientRepository,
        projects: ProjectRepository,
        tasks: TaskRepository,
        transactions: TransactionRepository,
        invoices: InvoiceRepository,
        publications: PublicationRepository,
    ):
        self._executor = executor
        self._clients = clients
        self._projects = projects
        self._tasks = tasks
        self._transactions = transactions
        self._invoices = invoices
        self._publications = publications

    async def _gather(
        self,
        tenant_id: str,
        calls: Dict[str, Awaitable[Any]],
        defaults: Dict[str, Any],
    ) -> Tuple[Dict[str, Any], List[str]]:
        """Run ``calls`` concurrently; failures are replaced by ``defaults``."""
        outcomes = await asyncio.gather(*calls.values(), return_exceptions=True)

        results: Dict[str, Any] = {}
        degraded: List[str] = []
        for name, outcome in zip(calls.keys(), outcomes):
            if isinstance(outcome, TenantNotInitializedError):
                # Schema vanished mid-request; not a per-module problem
                raise outcome
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(f"[{tenant_id}] dashboard module '{name}' degraded: {outcome!r}")
                results[name] = defaults[name]
                degraded.append(name)
            else:
                results[name] = outcome
        return results, degraded

    async def get_metrics(
        self,
        tenant_id: str,
        user_id: Optional[str],
        account_type: AccountType = AccountType.SIMPLES,
    ) -> DashboardMetrics:
        """Statistics for every module visible to the caller's tier.

        Raises:
            TenantNotInitializedError: schema missing (STRICT policy)
            TenantInactiveError: the tenant is deactivated
        """
        account_type = AccountType(account_type)
        await self._executor.ensure_ready(tenant_id)

        calls: Dict[str, Awaitable[Any]] = {
            "clients": self._clients.stats(tenant_id),
            "projects": self._projects.stats(tenant_id),
            "tasks": self._tasks.stats(tenant_id),
        }
        defaults: Dict[str, Any] = {
            "clients": self._clients.empty_stats(),
            "projects": self._projects.empty_stats(),
            "tasks": self._tasks.empty_stats(),
            "publications": self._publications.empty_stats(),
            "transactions": self._transactions.empty_stats(),
            "invoices": self._invoices.empty_stats(),
        }
        # Publications are per lawyer; without a caller there is nothing to count
        if user_id:
            calls["publications"] = self._publications.stats(tenant_id, user_id)
        financial = account_type.has_financial_access
        if financial:
            calls["transactions"] = self._transactions.stats(tenant_id)
            calls["invoices"] = self._invoices.stats(tenant_id)

        results, degraded = await self._gather(tenant_id, calls, defaults)

        return DashboardMetrics(
            clients=results["clients"],
            projects=results["projects"],
            tasks=results["tasks"],
            publications=results.get("publications", defaults["publications"]),
            financial=(
                {"transactions": results["transactions"], "invoices": results["invoices"]}
                if financial else None
            ),
            degraded_modules=degraded,
        )

    async def get_recent_activity(
        self,
        tenant_id: str,
        limit: int = 10,
    ) -> List[RecentActivity]:
        """Newest clients, projects and tasks merged by creation date."""
        if limit < 1:
            raise ValidationError(
                "Limit must be positive",
                field_errors=[{"field": "limit", "message": "must be at least 1"}],
            )
        await self._executor.ensure_ready(tenant_id)

        results, _ = await self._gather(
            tenant_id,
            {
                "clients": self._clients.recent(tenant_id, limit),
                "projects": self._projects.recent(tenant_id, limit),
                "tasks": self._tasks.recent(tenant_id, limit),
            },
            {"clients": [], "projects": [], "tasks": []},
        )

        activity: List[RecentActivity] = []
        for client in results["clients"]:
            activity.append(RecentActivity(
                id=client.id,
                type="client",
                title=f"Client: {client.name}",
                description="New client added",
                date=client.created_at,
                status=client.status,
            ))
        for project in results["projects"]:
            activity.append(RecentActivity(
                id=project.id,
                type="project",
                title=f"Project: {project.title}",
                description=f"Client: {project.client_name or '-'}",
                date=project.created_at,
                status=project.status,
                amount=float(project.budget) if project.budget is not None else None,
            ))
        for task in results["tasks"]:
            activity.append(RecentActivity(
                id=task.id,
                type="task",
                title=f"Task: {task.title}",
                description=f"Progress: {task.progress}%",
                date=task.created_at,
                status=task.status,
            ))

        activity.sort(key=lambda item: item.date or EPOCH, reverse=True)
        return activity[:limit]

    async def get_chart_data(
        self,
        tenant_id: str,
        account_type: AccountType = AccountType.SIMPLES,
        period_days: int = 30,
    ) -> ChartData:
        """Series for the dashboard charts over the last ``period_days`` days."""
        if not 1 <= period_days <= MAX_PERIOD_DAYS:
            raise ValidationError(
                "Invalid chart period",
                field_errors=[{"field": "period_days", "message": f"must be between 1 and {MAX_PERIOD_DAYS}"}],
            )
        account_type = AccountType(account_type)
        await self._executor.ensure_ready(tenant_id)

        since = datetime.now(timezone.utc) - timedelta(days=period_days)
        calls: Dict[str, Awaitable[Any]] = {
            "projects": self._projects.status_breakdown(tenant_id, since),
            "tasks": self._tasks.status_breakdown(tenant_id, since),
        }
        financial = account_type.has_financial_access
        if financial:
            calls["categories"] = self._transactions.by_category(tenant_id, since.date())
            calls["cash_flow"] = self._transactions.cash_flow(tenant_id, since.date())

        results, degraded = await self._gather(tenant_id, calls, {name: [] for name in calls})

        return ChartData(
            period_days=period_days,
            projects=results["projects"],
            tasks=results["tasks"],
            financial=(
                {"categories": results["categories"], "cash_flow": results["cash_flow"]}
                if financial else None
            ),
            degraded_modules=degraded,
        )
