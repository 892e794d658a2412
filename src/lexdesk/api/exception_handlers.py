"""
Exception handlers for FastAPI applications.

Client errors (4xx) return the structured error body; server errors (5xx)
return a generic message and are logged with full detail.
"""
from typing import Any, Callable, Dict, Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from ..core.exceptions import LexdeskError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An unexpected error occurred"

ResponseFormatter = Callable[[LexdeskError], Dict[str, Any]]


class ExceptionHandlerRegistry:
    """Registers lexdesk exception handlers on an application."""

    def __init__(
        self,
        response_formatter: Optional[ResponseFormatter] = None,
        debug: bool = False
    ):
        """
        Args:
            response_formatter: Builds the body for a ``LexdeskError``
            debug: Put the exception text in 5xx responses (never in production)
        """
        self.response_formatter = response_formatter or create_error_response
        self.debug = debug

    def _server_error_body(self, code: str, exc: Exception) -> Dict[str, Any]:
        message = str(exc) if self.debug else GENERIC_SERVER_ERROR
        return {"error": {"code": code, "message": message, "details": {}, "type": "ServerError"}}

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application.

        Args:
            app: FastAPI application instance
        """
        @app.exception_handler(LexdeskError)
        async def lexdesk_exception_handler(request: Request, exc: LexdeskError):
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(
                    f"{exc.error_code} on {request.method} {request.url.path}: "
                    f"{exc.message} details={exc.details}",
                    exc_info=exc,
                )
                return JSONResponse(
                    status_code=status_code,
                    content=self._server_error_body(exc.error_code, exc),
                )
            return JSONResponse(status_code=status_code, content=self.response_formatter(exc))

        @app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            field_errors = [
                {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg", "")}
                for error in exc.errors()
            ]
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "error": {
                        "code": "ValidationError",
                        "message": "Invalid request",
                        "details": {"field_errors": field_errors},
                        "type": "ValidationError",
                    }
                },
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=self._server_error_body("InternalError", exc),
            )


def register_exception_handlers(
    app: FastAPI,
    debug: bool = False,
    response_formatter: Optional[ResponseFormatter] = None,
) -> None:
    """
    Register exception handlers for a FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Expose exception text in 5xx responses
        response_formatter: Custom body builder for client errors
    """
    registry = ExceptionHandlerRegistry(response_formatter, debug)
    registry.register_handlers(app)
