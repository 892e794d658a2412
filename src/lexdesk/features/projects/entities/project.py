"""Project entity."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ....core.entities import TenantRecord


@dataclass
class Project(TenantRecord):
    """A case or engagement moving through the sales pipeline."""

    title: str
    description: Optional[str] = None
    client_name: Optional[str] = None
    client_id: Optional[str] = None
    organization: Optional[str] = None
    address: Optional[str] = None
    budget: Optional[Decimal] = None
    currency: str = "BRL"
    status: str = "contacted"
    priority: str = "medium"
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    progress: int = 0
    tags: List[str] = field(default_factory=list)
    assigned_to: List[str] = field(default_factory=list)
    contacts: List[Dict[str, Any]] = field(default_factory=list)
    notes: Optional[str] = None
