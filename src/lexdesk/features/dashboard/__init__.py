"""Dashboard aggregation."""

from .entities.metrics import ChartData, DashboardMetrics, RecentActivity
from .services.dashboard_service import DashboardService

__all__ = ["ChartData", "DashboardMetrics", "RecentActivity", "DashboardService"]
