"""Exception hierarchy for lexdesk."""

from .base import LexdeskError, create_error_response, get_http_status_code
from .domain import (
    ValidationError,
    EntityNotFoundError,
    TenantError,
    TenantNotFoundError,
    TenantInactiveError,
    ConflictError,
    RegistrationKeyError,
)
from .database import (
    StoreError,
    InvalidSchemaError,
    TenantNotInitializedError,
    ProvisioningError,
)
from .http_mapping import HTTP_STATUS_MAP, is_client_error

__all__ = [
    "LexdeskError",
    "create_error_response",
    "get_http_status_code",
    "ValidationError",
    "EntityNotFoundError",
    "TenantError",
    "TenantNotFoundError",
    "TenantInactiveError",
    "ConflictError",
    "RegistrationKeyError",
    "StoreError",
    "InvalidSchemaError",
    "TenantNotInitializedError",
    "ProvisioningError",
    "HTTP_STATUS_MAP",
    "is_client_error",
]
