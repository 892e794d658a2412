"""Invoice request models."""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from ....models.base import BaseSchema, UpdateSchema, ensure_date_order

InvoiceStatus = Literal["draft", "pending", "paid", "overdue", "cancelled"]
InvoiceType = Literal["invoice", "receipt", "estimate"]


class CreateInvoiceRequest(BaseSchema):
    number: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    tax_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    total_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    issue_date: date
    due_date: date
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    project_id: Optional[str] = None
    type: InvoiceType = "invoice"
    status: InvoiceStatus = "draft"
    currency: str = Field("BRL", min_length=3, max_length=3)
    description: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def fill_total(self):
        ensure_date_order(self.issue_date, self.due_date, "due date")
        if self.total_amount is None:
            self.total_amount = self.amount + self.tax_amount
        return self


class UpdateInvoiceRequest(UpdateSchema):
    number: Optional[str] = Field(None, min_length=1, max_length=50)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    tax_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    total_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    project_id: Optional[str] = None
    type: Optional[InvoiceType] = None
    status: Optional[InvoiceStatus] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    description: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
