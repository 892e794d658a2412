"""Cash flow transaction entity."""

from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ....core.entities import TenantRecord


@dataclass
class Transaction(TenantRecord):
    type: str
    category: str
    amount: Decimal
    date: dt.date
    category_id: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None
    client_id: Optional[str] = None
    payment_method: Optional[str] = None
    status: str = "confirmed"
    tags: List[str] = field(default_factory=list)
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    notes: Optional[str] = None
    last_modified_by: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == "income" else -self.amount
