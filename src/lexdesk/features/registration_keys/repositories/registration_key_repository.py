"""Registration key repository over the admin ``registration_keys`` table."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ....core.exceptions import EntityNotFoundError
from ....database.error_handling import database_error_handler
from ....database.protocols import Store
from ....database.utils import process_database_record, to_jsonb
from ...tenancy.repositories.schema_registry import TenantSchemaRegistry
from ..entities.registration_key import RegistrationKey
from ..models.requests import CreateKeyRequest
from ..utils.queries import (
    KEY_COUNT_BY_ACCOUNT_TYPE,
    KEY_GET_BY_ID,
    KEY_INSERT,
    KEY_LIST,
    KEY_LIST_BY_TENANT,
    KEY_LOCK_BY_HASH,
    KEY_RECORD_USE,
    KEY_REVOKE,
)

logger = logging.getLogger(__name__)


def _key(row: Any) -> RegistrationKey:
    return RegistrationKey.from_row(process_database_record(row))


class RegistrationKeyRepository:
    """Persistence for registration keys. Consumption locks the row."""

    def __init__(self, store: Store, registry: TenantSchemaRegistry):
        self._store = store
        self._registry = registry

    def _q(self, template: str) -> str:
        return self._registry.admin_query(template)

    @database_error_handler("create registration key")
    async def create(self, key_id: str, key_hash: str, request: CreateKeyRequest, created_by: Optional[str]) -> RegistrationKey:
        row = await self._store.fetchrow(
            self._q(KEY_INSERT),
            key_id,
            key_hash,
            request.tenant_id,
            request.account_type.value,
            request.uses_allowed,
            request.single_use,
            request.expires_at,
            to_jsonb(request.metadata),
            created_by,
        )
        return _key(row)

    @database_error_handler("get registration key")
    async def find(self, key_id: str) -> Optional[RegistrationKey]:
        row = await self._store.fetchrow(self._q(KEY_GET_BY_ID), key_id)
        return _key(row) if row else None

    async def get(self, key_id: str) -> RegistrationKey:
        key = await self.find(key_id)
        if key is None:
            raise EntityNotFoundError("RegistrationKey", key_id)
        return key

    @database_error_handler("list registration keys")
    async def list(self, tenant_id: Optional[str] = None) -> List[RegistrationKey]:
        if tenant_id:
            rows = await self._store.fetch(self._q(KEY_LIST_BY_TENANT), tenant_id)
        else:
            rows = await self._store.fetch(self._q(KEY_LIST))
        return [_key(row) for row in rows]

    @database_error_handler("revoke registration key")
    async def revoke(self, key_id: str) -> bool:
        status = await self._store.execute(self._q(KEY_REVOKE), key_id)
        return status.endswith(" 1")

    async def lock_by_hash(self, connection: Any, key_hash: str) -> Optional[RegistrationKey]:
        """SELECT ... FOR UPDATE inside the caller's transaction."""
        row = await connection.fetchrow(self._q(KEY_LOCK_BY_HASH), key_hash)
        return _key(row) if row else None

    async def record_use(self, connection: Any, key_id: str, user: Dict[str, Any]) -> Optional[RegistrationKey]:
        """Decrement ``uses_left`` and append a usage log entry on ``connection``."""
        entry = {
            "user_id": user.get("id"),
            "email": user.get("email"),
            "used_at": datetime.now(timezone.utc).isoformat(),
        }
        row = await connection.fetchrow(self._q(KEY_RECORD_USE), key_id, to_jsonb([entry]))
        return _key(row) if row else None

    @database_error_handler("count registration keys")
    async def count_by_account_type(self) -> Dict[str, int]:
        rows = await self._store.fetch(self._q(KEY_COUNT_BY_ACCOUNT_TYPE))
        return {row["account_type"]: int(row["total"]) for row in rows}
