"""Task repository."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ....core.exceptions import ValidationError
from ....database.utils import to_float, to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import TASKS
from ..entities.task import Task
from ..models.requests import CreateTaskRequest, UpdateTaskRequest
from ..utils.queries import TASK_STATS, TASKS_BY_STATUS_AND_PRIORITY


class TaskRepository(TenantScopedRepository[Task]):
    table = TASKS
    entity = Task
    id_prefix = "task"
    create_model = CreateTaskRequest
    update_model = UpdateTaskRequest
    search_columns = ("title", "description", "client_name", "project_title")

    STATS_DEFAULTS = {
        "total": 0,
        "completed": 0,
        "in_progress": 0,
        "not_started": 0,
        "urgent": 0,
    }

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        row = await self._executor.fetch_one(tenant_id, TASK_STATS) or {}
        return {key: to_int(row.get(key)) for key in self.STATS_DEFAULTS}

    async def update_progress(self, tenant_id: str, task_id: str, progress: int) -> Task:
        """Set progress; 100 completes the task, anything above 0 starts it."""
        if not 0 <= progress <= 100:
            raise ValidationError(
                "Progress must be between 0 and 100",
                field_errors=[{"field": "progress", "message": "must be between 0 and 100"}],
            )
        values: Dict[str, Any] = {"progress": progress}
        raw = []
        if progress == 100:
            values["status"] = "completed"
            raw.append("completed_at = NOW()")
        elif progress > 0:
            values["status"] = "in_progress"
        return await self._update_columns(tenant_id, task_id, values, raw_assignments=raw)

    async def status_breakdown(self, tenant_id: str, since: datetime) -> List[Dict[str, Any]]:
        rows = await self._executor.execute(tenant_id, TASKS_BY_STATUS_AND_PRIORITY, [since])
        return [
            {
                "status": row["status"],
                "priority": row["priority"],
                "count": to_int(row.get("count")),
                "avg_progress": round(to_float(row.get("avg_progress")), 1),
            }
            for row in rows
        ]
