"""Domain-specific exceptions for lexdesk.

These relate to business concepts: bad input, missing records, tenant
state and registration keys.
"""

from typing import Any, Dict, List, Optional

from .base import LexdeskError


class ValidationError(LexdeskError):
    """Raised when input fails validation.

    ``field_errors`` is a list of ``{"field": ..., "message": ...}`` dicts.
    """

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field_errors = field_errors or []
        merged = dict(details or {})
        if self.field_errors:
            merged["field_errors"] = self.field_errors
        super().__init__(message, details=merged)

    @classmethod
    def from_pydantic(cls, exc: Any, message: str = "Invalid input") -> "ValidationError":
        """Build from a ``pydantic.ValidationError``."""
        field_errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        return cls(message, field_errors=field_errors)


class EntityNotFoundError(LexdeskError):
    """Raised when a query succeeded but no matching row exists."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' not found",
            details={"entity": entity, "id": entity_id},
        )


class TenantError(LexdeskError):
    """Base class for tenant-related errors."""
    pass


class TenantNotFoundError(TenantError):
    """Raised when an admin operation targets a tenant row that does not exist."""

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            f"Tenant '{tenant_id}' not found",
            details={"tenant_id": tenant_id},
        )


class TenantInactiveError(TenantError):
    """Raised when a deactivated tenant is used for data access."""

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            f"Tenant '{tenant_id}' is inactive",
            details={"tenant_id": tenant_id},
        )


class ConflictError(LexdeskError):
    """Raised when a write would violate a uniqueness rule."""
    pass


class RegistrationKeyError(LexdeskError):
    """Raised when a registration key cannot be consumed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            f"Registration key rejected: {reason}",
            details={"reason": reason},
        )
