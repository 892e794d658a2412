"""HTTP status code mapping for exceptions.

Lookup walks the exception's MRO so subclasses inherit the status of the
nearest mapped ancestor.
"""

from typing import Dict, Type

from .base import LexdeskError
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


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidSchemaError: 400,
    RegistrationKeyError: 400,

    # 403 Forbidden
    TenantInactiveError: 403,

    # 404 Not Found
    EntityNotFoundError: 404,
    TenantNotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    TenantNotInitializedError: 409,

    # 422 Unprocessable Entity
    ValidationError: 422,

    # 500 Internal Server Error
    StoreError: 500,
    ProvisioningError: 500,
    TenantError: 500,
    LexdeskError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 when nothing in the MRO is mapped
    """
    for klass in type(exception).__mro__:
        status_code = HTTP_STATUS_MAP.get(klass)
        if status_code is not None:
            return status_code
    return 500


def is_client_error(exception: Exception) -> bool:
    """Whether the exception maps to a 4xx response."""
    return 400 <= get_http_status_code(exception) < 500
