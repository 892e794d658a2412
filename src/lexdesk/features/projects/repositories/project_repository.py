"""Project repository."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ....database.utils import to_float, to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import PROJECTS
from ..entities.project import Project
from ..models.requests import CreateProjectRequest, UpdateProjectRequest
from ..utils.queries import PROJECT_STATS, PROJECTS_BY_STATUS


class ProjectRepository(TenantScopedRepository[Project]):
    table = PROJECTS
    entity = Project
    id_prefix = "project"
    create_model = CreateProjectRequest
    update_model = UpdateProjectRequest
    search_columns = ("title", "client_name", "description")

    STATS_DEFAULTS = {
        "total": 0,
        "contacted": 0,
        "proposal": 0,
        "won": 0,
        "lost": 0,
        "this_month": 0,
    }

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        row = await self._executor.fetch_one(tenant_id, PROJECT_STATS) or {}
        return {key: to_int(row.get(key)) for key in self.STATS_DEFAULTS}

    async def status_breakdown(self, tenant_id: str, since: datetime) -> List[Dict[str, Any]]:
        rows = await self._executor.execute(tenant_id, PROJECTS_BY_STATUS, [since])
        return [
            {
                "status": row["status"],
                "count": to_int(row.get("count")),
                "total_budget": to_float(row.get("total_budget")),
            }
            for row in rows
        ]
