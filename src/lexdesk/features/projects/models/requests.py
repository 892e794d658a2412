"""Project request models."""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from ....models.base import BaseSchema, UpdateSchema, ensure_date_order

ProjectStatus = Literal["contacted", "proposal", "won", "lost"]
Priority = Literal["low", "medium", "high", "urgent"]


class CreateProjectRequest(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    client_id: Optional[str] = None
    organization: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    currency: str = Field("BRL", min_length=3, max_length=3)
    status: ProjectStatus = "contacted"
    priority: Priority = "medium"
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    progress: int = Field(0, ge=0, le=100)
    tags: List[str] = Field(default_factory=list)
    assigned_to: List[str] = Field(default_factory=list)
    contacts: List[Dict[str, Any]] = Field(default_factory=list)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        ensure_date_order(self.start_date, self.due_date, "due date")
        return self


class UpdateProjectRequest(UpdateSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    client_id: Optional[str] = None
    organization: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    tags: Optional[List[str]] = None
    assigned_to: Optional[List[str]] = None
    contacts: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
