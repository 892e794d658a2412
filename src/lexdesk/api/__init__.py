"""FastAPI integration: exception handlers, dependencies and lifespan."""

from .dependencies import get_container, get_dashboard_service, get_query_executor, get_tenant_context
from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers
from .lifespan import create_lifespan
from .app import create_app

__all__ = [
    "ExceptionHandlerRegistry",
    "register_exception_handlers",
    "get_container",
    "get_tenant_context",
    "get_query_executor",
    "get_dashboard_service",
    "create_lifespan",
    "create_app",
]
