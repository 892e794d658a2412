"""Notifications module."""

from .entities.notification import Notification
from .models.requests import CreateNotificationRequest, UpdateNotificationRequest
from .repositories.notification_repository import NotificationRepository

__all__ = [
    "Notification",
    "CreateNotificationRequest",
    "UpdateNotificationRequest",
    "NotificationRepository",
]
