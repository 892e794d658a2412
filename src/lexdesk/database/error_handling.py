"""Error translation for database operations.

Driver and network failures become ``StoreError``; lexdesk errors raised
inside the wrapped operation pass through untouched.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, Tuple, Type

import asyncpg

from ..core.exceptions import LexdeskError, StoreError

logger = logging.getLogger(__name__)

STORE_FAILURES: Tuple[Type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


def to_store_error(exc: BaseException, operation_name: str) -> StoreError:
    """Wrap a driver failure without leaking SQL into the message."""
    details = {"operation": operation_name}
    sqlstate = getattr(exc, "sqlstate", None)
    if sqlstate:
        details["sqlstate"] = sqlstate
    return StoreError(f"Database operation failed: {operation_name}", details=details)


def database_error_handler(operation_name: str, log_level: int = logging.ERROR):
    """Decorator translating store failures into ``StoreError``.

    Usage:
        @database_error_handler("list tenants")
        async def list_tenants(self):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except LexdeskError:
                raise
            except STORE_FAILURES as e:
                logger.log(log_level, f"Failed to {operation_name}: {e!r} | function={func.__name__}")
                raise to_store_error(e, operation_name) from e
        return wrapper
    return decorator


def format_database_error(error: BaseException, query: Optional[str] = None) -> str:
    """One-line description of a failure for logs (never for clients)."""
    text = f"{type(error).__name__}: {error}"
    if query:
        text += f" | query={' '.join(query.split())}"
    return text
