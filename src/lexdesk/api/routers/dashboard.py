"""Dashboard API endpoints."""

from fastapi import APIRouter, Depends, Query

from ...features.dashboard.services.dashboard_service import DashboardService
from ...features.tenancy.entities.tenant import TenantContext
from ..dependencies import get_dashboard_service, get_tenant_context

router = APIRouter()


@router.get("/metrics")
async def get_dashboard_metrics(
    context: TenantContext = Depends(get_tenant_context),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """Per-module statistics; ``degraded_modules`` lists modules that failed to load."""
    metrics = await dashboard.get_metrics(context.tenant_id, context.user_id, context.account_type)
    return metrics.to_dict()


@router.get("/recent-activity")
async def get_recent_activity(
    limit: int = Query(10, ge=1, le=50),
    context: TenantContext = Depends(get_tenant_context),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    activity = await dashboard.get_recent_activity(context.tenant_id, limit)
    return {"items": [item.to_dict() for item in activity], "total": len(activity)}


@router.get("/charts")
async def get_chart_data(
    period_days: int = Query(30, ge=1, le=366),
    context: TenantContext = Depends(get_tenant_context),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    charts = await dashboard.get_chart_data(context.tenant_id, context.account_type, period_days)
    return charts.to_dict()
