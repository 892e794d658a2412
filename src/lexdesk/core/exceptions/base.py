"""Base exceptions for lexdesk.

This module defines the root of the lexdesk exception hierarchy. Every
exception carries an error code and a details dictionary so that API
handlers can build structured responses without inspecting messages.
"""

from typing import Any, Dict, Optional


class LexdeskError(Exception):
    """Base exception for all lexdesk errors.

    All exceptions in lexdesk inherit from this base class and include
    structured error information for debugging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as mapped_status_code
    return mapped_status_code(exception)


def create_error_response(exception: LexdeskError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The lexdesk exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
