"""Database and schema related exceptions for lexdesk."""

from typing import Any, Dict, Optional

from .base import LexdeskError
from .domain import TenantError, ValidationError


class StoreError(LexdeskError):
    """Raised when the store fails (connectivity, constraint, timeout).

    The message never contains the SQL text; the failing query is logged
    where the error is raised.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)


class InvalidSchemaError(ValidationError):
    """Raised when a schema name is not a safe identifier."""

    def __init__(self, schema_name: str, reason: str = ""):
        self.schema_name = schema_name
        self.reason = reason
        message = f"Invalid schema name '{schema_name}'"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            field_errors=[{"field": "schema_name", "message": reason or "invalid identifier"}],
        )


class TenantNotInitializedError(TenantError):
    """Raised when a tenant has no row or its schema has not been provisioned."""

    def __init__(self, tenant_id: str, reason: str = ""):
        self.tenant_id = tenant_id
        self.reason = reason
        message = f"Tenant '{tenant_id}' is not initialized"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={"tenant_id": tenant_id})


class ProvisioningError(LexdeskError):
    """Raised when schema DDL fails. Provisioning is idempotent, so retrying is safe."""

    def __init__(self, tenant_id: str, reason: str = "", retryable: bool = True):
        self.tenant_id = tenant_id
        self.reason = reason
        self.retryable = retryable
        message = f"Provisioning failed for tenant '{tenant_id}'"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            details={"tenant_id": tenant_id, "retryable": retryable},
        )
