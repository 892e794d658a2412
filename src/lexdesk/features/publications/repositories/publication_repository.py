"""Publication repository.

Publications belong to the lawyer who imported them: every operation is
scoped by ``user_id`` on top of the tenant schema.
"""

from typing import Any, Dict, Optional

from ....database.utils import to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import PUBLICATIONS
from ..entities.publication import Publication
from ..models.requests import CreatePublicationRequest, UpdatePublicationRequest
from ..utils.queries import PUBLICATION_STATS


class PublicationRepository(TenantScopedRepository[Publication]):
    table = PUBLICATIONS
    entity = Publication
    id_prefix = "publication"
    create_model = CreatePublicationRequest
    update_model = UpdatePublicationRequest
    search_columns = ("content", "process_number", "oab_number")
    date_column = "publication_date"
    scope_column = "user_id"

    STATS_DEFAULTS = {"total": 0, "novo": 0, "lido": 0, "arquivado": 0, "this_month": 0}

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        user_id = self._scope(scope_value)[self.scope_column]
        row = await self._executor.fetch_one(tenant_id, PUBLICATION_STATS, [user_id]) or {}
        return {key: to_int(row.get(key)) for key in self.STATS_DEFAULTS}

    async def set_status(self, tenant_id: str, user_id: str, publication_id: str, status: str) -> Publication:
        return await self.update(tenant_id, publication_id, {"status": status}, scope_value=user_id)

    async def mark_read(self, tenant_id: str, user_id: str, publication_id: str) -> Publication:
        return await self.set_status(tenant_id, user_id, publication_id, "lido")

    async def archive(self, tenant_id: str, user_id: str, publication_id: str) -> Publication:
        return await self.set_status(tenant_id, user_id, publication_id, "arquivado")
