"""Invoice entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ....core.entities import TenantRecord


@dataclass
class Invoice(TenantRecord):
    number: str
    amount: Decimal
    total_amount: Decimal
    issue_date: date
    due_date: date
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    project_id: Optional[str] = None
    type: str = "invoice"
    status: str = "draft"
    tax_amount: Decimal = Decimal("0")
    currency: str = "BRL"
    paid_at: Optional[datetime] = None
    description: Optional[str] = None
    items: List[Dict[str, Any]] = field(default_factory=list)
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def is_overdue(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return self.status == "pending" and self.due_date < today
