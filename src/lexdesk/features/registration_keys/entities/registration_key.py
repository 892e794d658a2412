"""Registration key entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ....config.constants import AccountType


@dataclass
class RegistrationKey:
    """A stored key. The secret itself is never kept, only its digest."""

    id: str
    key_hash: str
    account_type: AccountType
    uses_allowed: int = 1
    uses_left: int = 1
    single_use: bool = True
    tenant_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    used_logs: List[Dict[str, Any]] = field(default_factory=list)
    revoked: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RegistrationKey":
        return cls(
            id=str(row["id"]),
            key_hash=row["key_hash"],
            account_type=AccountType(row["account_type"]),
            uses_allowed=row.get("uses_allowed") or 0,
            uses_left=row.get("uses_left") or 0,
            single_use=bool(row.get("single_use", True)),
            tenant_id=row.get("tenant_id"),
            expires_at=row.get("expires_at"),
            metadata=row.get("metadata") or {},
            used_logs=row.get("used_logs") or [],
            revoked=bool(row.get("revoked", False)),
            created_by=row.get("created_by"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now

    def rejection_reason(self, now: Optional[datetime] = None) -> Optional[str]:
        """Why the key cannot be used right now, or None when it can."""
        if self.revoked:
            return "revoked"
        if self.uses_left <= 0:
            return "exhausted"
        if self.is_expired(now):
            return "expired"
        return None

    def usage(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "account_type": self.account_type.value,
            "uses_allowed": self.uses_allowed,
            "uses_left": self.uses_left,
            "used_logs": self.used_logs,
            "revoked": self.revoked,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
