"""Client repository."""

from typing import Any, Dict, Optional

from ....database.utils import to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import CLIENTS
from ..entities.client import Client
from ..models.requests import CreateClientRequest, UpdateClientRequest
from ..utils.queries import CLIENT_STATS


class ClientRepository(TenantScopedRepository[Client]):
    table = CLIENTS
    entity = Client
    id_prefix = "client"
    create_model = CreateClientRequest
    update_model = UpdateClientRequest
    search_columns = ("name", "email", "document")

    STATS_DEFAULTS = {"total": 0, "active": 0, "inactive": 0, "this_month": 0}

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        row = await self._executor.fetch_one(tenant_id, CLIENT_STATS) or {}
        return {key: to_int(row.get(key)) for key in self.STATS_DEFAULTS}
