"""Publication entity (court journal entries tracked per lawyer)."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ....core.entities import TenantRecord


@dataclass
class Publication(TenantRecord):
    user_id: str
    oab_number: str
    publication_date: date
    content: str
    source: str
    process_number: Optional[str] = None
    external_id: Optional[str] = None
    status: str = "novo"
    tags: List[str] = field(default_factory=list)
