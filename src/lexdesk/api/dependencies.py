"""Common FastAPI dependencies."""

from fastapi import Depends, Request

from ..bootstrap import Container
from ..config.constants import AccountType
from ..core.exceptions import ValidationError
from ..features.dashboard.services.dashboard_service import DashboardService
from ..features.tenancy.entities.tenant import TenantContext
from ..features.tenancy.services.query_executor import TenantQueryExecutor


def get_container(request: Request) -> Container:
    """Container built by the application lifespan."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Application container is not initialized; is the lifespan installed?")
    return container


async def get_tenant_context(request: Request) -> TenantContext:
    """Caller identity set on ``request.state`` by the authentication layer.

    Expects ``tenant_id`` and ``user_id``; ``account_type`` defaults to
    SIMPLES.
    """
    tenant_id = getattr(request.state, "tenant_id", None)
    user_id = getattr(request.state, "user_id", None)
    missing = [
        {"field": name, "message": "missing from authenticated request"}
        for name, value in (("tenant_id", tenant_id), ("user_id", user_id))
        if not value
    ]
    if missing:
        raise ValidationError("Request has no tenant context", field_errors=missing)

    try:
        account_type = AccountType(getattr(request.state, "account_type", None) or AccountType.SIMPLES)
    except ValueError as e:
        raise ValidationError(
            "Unknown account type",
            field_errors=[{"field": "account_type", "message": str(e)}],
        ) from e
    return TenantContext(tenant_id=str(tenant_id), user_id=str(user_id), account_type=account_type)


async def get_query_executor(container: Container = Depends(get_container)) -> TenantQueryExecutor:
    return container.executor


async def get_dashboard_service(container: Container = Depends(get_container)) -> DashboardService:
    return container.dashboard
