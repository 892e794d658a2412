"""Task request models."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from ....models.base import BaseSchema, UpdateSchema, ensure_date_order

TaskStatus = Literal["not_started", "in_progress", "completed", "on_hold", "cancelled"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


class CreateTaskRequest(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    assigned_to: str = Field(..., min_length=1)
    description: Optional[str] = None
    project_id: Optional[str] = None
    project_title: Optional[str] = Field(None, max_length=255)
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    status: TaskStatus = "not_started"
    priority: TaskPriority = "medium"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    estimated_hours: Optional[Decimal] = Field(None, ge=0)
    actual_hours: Optional[Decimal] = Field(None, ge=0)
    progress: int = Field(0, ge=0, le=100)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    subtasks: List[Dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        ensure_date_order(self.start_date, self.end_date)
        return self


class UpdateTaskRequest(UpdateSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    assigned_to: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    project_id: Optional[str] = None
    project_title: Optional[str] = Field(None, max_length=255)
    client_id: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    estimated_hours: Optional[Decimal] = Field(None, ge=0)
    actual_hours: Optional[Decimal] = Field(None, ge=0)
    progress: Optional[int] = Field(None, ge=0, le=100)
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    subtasks: Optional[List[Dict[str, Any]]] = None
