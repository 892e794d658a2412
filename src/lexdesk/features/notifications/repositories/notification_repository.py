"""Notification repository (per user)."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ....core.exceptions import ValidationError
from ....database.utils import to_int
from ...pagination import ListFilters, OffsetPaginationRequest, OffsetPaginationResponse
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import NOTIFICATIONS
from ..entities.notification import Notification
from ..models.requests import CreateNotificationRequest, UpdateNotificationRequest
from ..utils.queries import (
    NOTIFICATION_CLEANUP,
    NOTIFICATION_MARK_ALL_READ,
    NOTIFICATION_STATS,
    NOTIFICATION_UNREAD_COUNT,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


class NotificationRepository(TenantScopedRepository[Notification]):
    table = NOTIFICATIONS
    entity = Notification
    id_prefix = "notification"
    create_model = CreateNotificationRequest
    update_model = UpdateNotificationRequest
    search_columns = ("title", "message")
    scope_column = "user_id"

    STATS_DEFAULTS = {"total": 0, "unread": 0, "read": 0}

    async def list_for_user(
        self,
        tenant_id: str,
        user_id: str,
        unread_only: bool = False,
        pagination: Optional[OffsetPaginationRequest] = None,
    ) -> OffsetPaginationResponse[Notification]:
        filters = ListFilters(extra={"read": False}) if unread_only else None
        return await self.list(tenant_id, filters, pagination, scope_value=user_id)

    async def notify(self, tenant_id: str, user_id: str, data: Any) -> Notification:
        return await self.create(tenant_id, data, created_by=user_id, scope_value=user_id)

    async def notify_many(self, tenant_id: str, user_ids: Iterable[str], data: Any) -> List[Notification]:
        """Send the same notification to each user once, in the given order."""
        recipients = list(dict.fromkeys(user_id for user_id in user_ids if user_id))
        if not recipients:
            raise ValidationError(
                "At least one recipient is required",
                field_errors=[{"field": "user_ids", "message": "must not be empty"}],
            )
        payload = self._validate(self.create_model, data)
        return [await self.notify(tenant_id, user_id, payload) for user_id in recipients]

    async def cleanup_older_than(self, tenant_id: str, days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Soft-delete notifications older than ``days`` for all users; returns the count."""
        if days < 1:
            raise ValidationError(
                "Retention must be at least one day",
                field_errors=[{"field": "days", "message": "must be at least 1"}],
            )
        status = await self._executor.run(tenant_id, NOTIFICATION_CLEANUP, [days])
        removed = int(status.split()[-1])
        logger.info(f"[{tenant_id}] archived {removed} notifications older than {days} days")
        return removed

    async def mark_read(self, tenant_id: str, user_id: str, notification_id: str) -> Notification:
        return await self._update_columns(
            tenant_id,
            notification_id,
            {"read": True},
            scope_value=user_id,
            raw_assignments=["read_at = NOW()"],
        )

    async def mark_all_read(self, tenant_id: str, user_id: str) -> int:
        """Returns how many notifications were marked read."""
        user_id = self._scope(user_id)[self.scope_column]
        status = await self._executor.run(tenant_id, NOTIFICATION_MARK_ALL_READ, [user_id])
        return int(status.split()[-1])

    async def unread_count(self, tenant_id: str, user_id: str) -> int:
        user_id = self._scope(user_id)[self.scope_column]
        return to_int(await self._executor.fetch_value(tenant_id, NOTIFICATION_UNREAD_COUNT, [user_id]))

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        user_id = self._scope(scope_value)[self.scope_column]
        row = await self._executor.fetch_one(tenant_id, NOTIFICATION_STATS, [user_id]) or {}
        return {key: to_int(row.get(key)) for key in self.STATS_DEFAULTS}
