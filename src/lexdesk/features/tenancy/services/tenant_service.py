"""Tenant administration: lifecycle of tenants and platform-wide statistics."""

import logging
from typing import TYPE_CHECKING, List, Optional

from ....config.constants import AccountType
from ....core.exceptions import LexdeskError, ProvisioningError, ValidationError
from ...pagination import OffsetPaginationRequest, OffsetPaginationResponse
from ..entities.tenant import GlobalMetrics, ProvisioningReport, RepairSummary, Tenant, TenantSummary
from ..repositories.tenant_repository import MODULE_COUNT_KEYS, TenantRepository
from ..utils.validation import TenantValidationRules
from .provisioner import SchemaProvisioner

if TYPE_CHECKING:
    from ...registration_keys.repositories.registration_key_repository import RegistrationKeyRepository

logger = logging.getLogger(__name__)

RECENT_TENANTS = 3


class TenantService:
    """Ties the tenant row lifecycle to the schema lifecycle.

    Creating a tenant inserts the row with its derived schema name and then
    provisions the schema. If provisioning fails the row stays; the tenant
    can be provisioned again later (the executor's LAZY policy or
    ``repair``) because provisioning is idempotent.
    """

    def __init__(
        self,
        repository: TenantRepository,
        provisioner: SchemaProvisioner,
        tenant_prefix: str,
        registration_keys: Optional["RegistrationKeyRepository"] = None,
    ):
        self._repository = repository
        self._provisioner = provisioner
        self._tenant_prefix = tenant_prefix
        self._registration_keys = registration_keys

    async def create_tenant(
        self,
        tenant_id: str,
        name: str,
        plan_type: AccountType = AccountType.SIMPLES,
        max_users: int = 5,
        max_storage_mb: int = 1024,
    ) -> Tenant:
        errors = TenantValidationRules.collect_errors(tenant_id, name)
        if errors:
            raise ValidationError("Invalid tenant", field_errors=errors)

        schema_name = TenantValidationRules.generate_schema_name(tenant_id, self._tenant_prefix)
        tenant = await self._repository.create(
            tenant_id=tenant_id,
            name=name.strip(),
            schema_name=schema_name,
            plan_type=plan_type,
            max_users=max_users,
            max_storage_mb=max_storage_mb,
        )

        try:
            await self._provisioner.provision_schema(tenant.id, schema_name)
        except ProvisioningError:
            logger.error(f"Tenant {tenant_id} created but schema provisioning failed; retry with repair")
            raise
        return tenant

    async def get_tenant(self, tenant_id: str) -> Tenant:
        return await self._repository.get(tenant_id)

    async def list_tenants(self, pagination: Optional[OffsetPaginationRequest] = None) -> OffsetPaginationResponse[Tenant]:
        return await self._repository.list(pagination or OffsetPaginationRequest())

    async def list_tenants_with_stats(
        self, pagination: Optional[OffsetPaginationRequest] = None
    ) -> OffsetPaginationResponse[TenantSummary]:
        """Tenants with active record counts per module.

        A tenant whose schema is missing or unreadable is listed with zeroed
        counts and ``stats_available=False``; one broken tenant never fails
        the listing. Schemas are read as they are, never provisioned here.
        """
        page = await self._repository.list(pagination or OffsetPaginationRequest())
        summaries: List[TenantSummary] = []
        for tenant in page.items:
            try:
                counts = await self._repository.module_counts(tenant.schema_name)
            except LexdeskError as e:
                logger.warning(f"Counts unavailable for tenant {tenant.id}: {e.message}")
                summaries.append(TenantSummary(tenant, dict.fromkeys(MODULE_COUNT_KEYS, 0), stats_available=False))
            else:
                summaries.append(TenantSummary(tenant, counts))
        return OffsetPaginationResponse(
            items=summaries,
            total=page.total,
            page=page.page,
            per_page=page.per_page,
        )

    async def global_metrics(self) -> GlobalMetrics:
        """Tenant totals, registration keys per account type and the newest tenants."""
        counts = await self._repository.status_counts()
        recent = await self._repository.list(OffsetPaginationRequest(page=1, per_page=RECENT_TENANTS))
        keys = await self._registration_keys.count_by_account_type() if self._registration_keys else {}
        return GlobalMetrics(
            total_tenants=counts["total"],
            active_tenants=counts["active"],
            registration_keys=keys,
            recent_tenants=recent.items,
        )

    async def deactivate_tenant(self, tenant_id: str) -> Tenant:
        """Soft: data stays, data access is refused until reactivated."""
        tenant = await self._repository.set_active(tenant_id, False)
        logger.info(f"Deactivated tenant {tenant_id}")
        return tenant

    async def reactivate_tenant(self, tenant_id: str) -> Tenant:
        tenant = await self._repository.set_active(tenant_id, True)
        logger.info(f"Reactivated tenant {tenant_id}")
        return tenant

    async def delete_tenant(self, tenant_id: str, *, confirm: bool = False) -> None:
        """Hard delete: drop the schema with all data, then remove the row."""
        if not confirm:
            raise ValidationError(
                "Deleting a tenant destroys all its data; pass confirm=True",
                field_errors=[{"field": "confirm", "message": "must be true"}],
            )
        tenant = await self._repository.get(tenant_id)
        await self._provisioner.drop_schema(tenant.schema_name)
        await self._repository.delete(tenant_id)
        logger.warning(f"Deleted tenant {tenant_id} and schema {tenant.schema_name}")

    async def provision_tenant(self, tenant_id: str) -> ProvisioningReport:
        return await self._provisioner.provision(tenant_id)

    async def repair_all(self) -> RepairSummary:
        return await self._provisioner.repair_all()
