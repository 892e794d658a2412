"""Client entity."""

from dataclasses import dataclass, field
from typing import List, Optional

from ....core.entities import TenantRecord


@dataclass
class Client(TenantRecord):
    """A client of the practice (person or company)."""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    status: str = "active"
    type: str = "individual"
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)
