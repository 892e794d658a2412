"""Transaction repository."""

from datetime import date
from typing import Any, Dict, List, Optional

from ....database.utils import to_float, to_int
from ....repositories.base import TenantScopedRepository
from ...tenancy.utils.schema_definitions import TRANSACTIONS
from ..entities.transaction import Transaction
from ..models.requests import CreateTransactionRequest, UpdateTransactionRequest
from ..utils.queries import CASH_FLOW_BY_DAY, TRANSACTION_STATS, TRANSACTIONS_BY_CATEGORY


class TransactionRepository(TenantScopedRepository[Transaction]):
    table = TRANSACTIONS
    entity = Transaction
    id_prefix = "transaction"
    create_model = CreateTransactionRequest
    update_model = UpdateTransactionRequest
    search_columns = ("description", "category")
    date_column = "date"

    STATS_DEFAULTS = {
        "total_income": 0.0,
        "total_expense": 0.0,
        "net_amount": 0.0,
        "this_month_income": 0.0,
        "this_month_expense": 0.0,
    }

    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        row = await self._executor.fetch_one(tenant_id, TRANSACTION_STATS) or {}
        income = to_float(row.get("total_income"))
        expense = to_float(row.get("total_expense"))
        return {
            "total_income": income,
            "total_expense": expense,
            "net_amount": income - expense,
            "this_month_income": to_float(row.get("this_month_income")),
            "this_month_expense": to_float(row.get("this_month_expense")),
        }

    async def by_category(self, tenant_id: str, since: date) -> List[Dict[str, Any]]:
        rows = await self._executor.execute(tenant_id, TRANSACTIONS_BY_CATEGORY, [since])
        return [
            {
                "category": row["category"],
                "type": row["type"],
                "count": to_int(row.get("count")),
                "total": to_float(row.get("total")),
            }
            for row in rows
        ]

    async def cash_flow(self, tenant_id: str, since: date) -> List[Dict[str, Any]]:
        rows = await self._executor.execute(tenant_id, CASH_FLOW_BY_DAY, [since])
        flow = []
        for row in rows:
            income = to_float(row.get("income"))
            expense = to_float(row.get("expense"))
            day = row["day"]
            flow.append({
                "day": day.isoformat() if hasattr(day, "isoformat") else day,
                "income": income,
                "expense": expense,
                "net": income - expense,
            })
        return flow
