"""Base class for tenant data records."""

from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Type, TypeVar

R = TypeVar("R", bound="TenantRecord")


@dataclass(kw_only=True)
class TenantRecord:
    """Columns shared by every tenant table.

    Keyword-only, so subclasses can declare required columns after these.
    """

    id: str
    created_by: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls: Type[R], row: Dict[str, Any]) -> R:
        """Build from a processed row; columns the entity does not know are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in row.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dictionary (dates as ISO strings, decimals as floats)."""
        return {key: _jsonable(value) for key, value in asdict(self).items()}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value
