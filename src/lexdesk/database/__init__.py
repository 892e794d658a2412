"""Database access: asyncpg store, store protocol and record helpers."""

from .connection import DatabaseStore
from .protocols import Store
from .utils import process_database_record

__all__ = ["DatabaseStore", "Store", "process_database_record"]
