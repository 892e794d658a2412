"""Task entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ....core.entities import TenantRecord


@dataclass
class Task(TenantRecord):
    title: str
    assigned_to: str
    description: Optional[str] = None
    project_id: Optional[str] = None
    project_title: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    status: str = "not_started"
    priority: str = "medium"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    progress: int = 0
    tags: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    subtasks: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"
