"""Transaction request models."""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from ....models.base import BaseSchema, UpdateSchema

TransactionType = Literal["income", "expense"]
TransactionStatus = Literal["pending", "confirmed", "cancelled"]
RecurringFrequency = Literal["weekly", "monthly", "quarterly", "yearly"]


class CreateTransactionRequest(BaseSchema):
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    date: dt.date
    category_id: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None
    client_id: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    status: TransactionStatus = "confirmed"
    tags: List[str] = Field(default_factory=list)
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    attachments: List[Dict[str, Any]] = Field(default_factory=list)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_recurrence(self):
        if self.is_recurring and not self.recurring_frequency:
            raise ValueError("recurring transactions need a recurring_frequency")
        return self


class UpdateTransactionRequest(UpdateSchema):
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    date: Optional[dt.date] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None
    client_id: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    status: Optional[TransactionStatus] = None
    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None
    attachments: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    last_modified_by: Optional[str] = None
