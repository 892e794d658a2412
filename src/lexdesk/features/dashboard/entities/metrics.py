"""Dashboard result types."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class DashboardMetrics:
    """Per-module statistics for one tenant and caller.

    ``financial`` is None for tiers without financial access. Modules whose
    statistics could not be loaded hold zeroed defaults and are listed in
    ``degraded_modules``.
    """

    clients: Dict[str, Any]
    projects: Dict[str, Any]
    tasks: Dict[str, Any]
    publications: Dict[str, Any]
    financial: Optional[Dict[str, Any]] = None
    degraded_modules: List[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_modules)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clients": self.clients,
            "projects": self.projects,
            "tasks": self.tasks,
            "publications": self.publications,
            "financial": self.financial,
            "degraded_modules": list(self.degraded_modules),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class RecentActivity:
    id: str
    type: str
    title: str
    description: str
    date: Optional[datetime] = None
    status: Optional[str] = None
    amount: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status,
            "amount": self.amount,
        }


@dataclass
class ChartData:
    period_days: int
    projects: List[Dict[str, Any]] = field(default_factory=list)
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    financial: Optional[Dict[str, List[Dict[str, Any]]]] = None
    degraded_modules: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_days": self.period_days,
            "projects": self.projects,
            "tasks": self.tasks,
            "financial": self.financial,
            "degraded_modules": list(self.degraded_modules),
        }
