"""Invoice repository."""

from datetime import date
from typing import Any, Dict, Optional

from ....database.utils import to_float, to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import INVOICES
from ..entities.invoice import Invoice
from ..models.requests import CreateInvoiceRequest, UpdateInvoiceRequest
from ..utils.queries import INVOICE_MARK_OVERDUE, INVOICE_STATS


class InvoiceRepository(TenantScopedRepository[Invoice]):
    table = INVOICES
    entity = Invoice
    id_prefix = "invoice"
    create_model = CreateInvoiceRequest
    update_model = UpdateInvoiceRequest
    search_columns = ("number", "client_name", "description")
    date_column = "issue_date"

    STATS_DEFAULTS = {
        "total": 0,
        "paid": 0,
        "pending": 0,
        "overdue": 0,
        "paid_amount": 0.0,
        "outstanding_amount": 0.0,
    }

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        row = await self._executor.fetch_one(tenant_id, INVOICE_STATS) or {}
        return {
            "total": to_int(row.get("total")),
            "paid": to_int(row.get("paid")),
            "pending": to_int(row.get("pending")),
            "overdue": to_int(row.get("overdue")),
            "paid_amount": to_float(row.get("paid_amount")),
            "outstanding_amount": to_float(row.get("outstanding_amount")),
        }

    async def mark_paid(self, tenant_id: str, invoice_id: str) -> Invoice:
        return await self._update_columns(
            tenant_id, invoice_id, {"status": "paid"}, raw_assignments=["paid_at = NOW()"]
        )

    async def mark_overdue(self, tenant_id: str, today: Optional[date] = None) -> int:
        """Flag pending invoices past their due date. Returns how many changed."""
        status = await self._executor.run(tenant_id, INVOICE_MARK_OVERDUE, [today or date.today()])
        return int(status.split()[-1])
