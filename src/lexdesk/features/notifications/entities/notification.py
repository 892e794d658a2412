"""Notification entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....core.entities import TenantRecord


@dataclass
class Notification(TenantRecord):
    user_id: str
    type: str
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    read: bool = False
    read_at: Optional[datetime] = None
