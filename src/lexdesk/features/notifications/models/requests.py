"""Notification request models."""

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from ....models.base import BaseSchema, UpdateSchema

NotificationType = Literal["info", "success", "warning", "error", "reminder"]


class CreateNotificationRequest(BaseSchema):
    type: NotificationType = "info"
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class UpdateNotificationRequest(UpdateSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    message: Optional[str] = Field(None, min_length=1)
    data: Optional[Dict[str, Any]] = None
