"""
Database store backed by an asyncpg connection pool.

One pool is shared by every tenant; schema qualification in the SQL text is
the only isolation boundary. The store is constructed explicitly and
injected, there is no module-level instance.
"""
import os
from typing import Optional, Any, List
from contextlib import asynccontextmanager
import asyncpg
from asyncpg import Pool, Record
import logging

from .queries import SCHEMA_EXISTENCE_CHECK, SCHEMA_TABLES_LIST, HEALTH_CHECK
from .error_handling import database_error_handler

logger = logging.getLogger(__name__)


class DatabaseStore:
    """Owns the asyncpg pool and runs positional-parameter SQL."""

    def __init__(self, database_url: str, application_name: str = "lexdesk", **pool_config):
        """Initialize DatabaseStore.

        Args:
            database_url: PostgreSQL DSN
            application_name: Reported to the server as ``application_name``
            **pool_config: Additional ``asyncpg.create_pool`` options
        """
        self.pool: Optional[Pool] = None
        self.dsn = database_url.replace("+asyncpg", "")
        self.application_name = application_name
        self.pool_config = {
            "min_size": 2,
            "max_size": 20,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": 60,
            **pool_config
        }

    @classmethod
    def from_env(cls, **pool_config) -> "DatabaseStore":
        """Build from ``DATABASE_URL`` and ``APP_NAME``."""
        return cls(
            os.getenv("DATABASE_URL", ""),
            application_name=os.getenv("APP_NAME", "lexdesk"),
            **pool_config
        )

    @property
    def is_open(self) -> bool:
        return self.pool is not None

    async def open(self) -> Pool:
        """Create the connection pool if it does not exist yet."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings={"application_name": self.application_name},
                **self.pool_config
            )
            logger.info("Database pool created successfully")
        return self.pool

    async def close(self) -> None:
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        if not self.pool:
            await self.open()

        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Create a transaction context yielding the connection."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args, timeout: float = None) -> str:
        """Execute a statement without returning rows."""
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: float = None) -> List[Record]:
        """Fetch multiple rows."""
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Record]:
        """Fetch a single row."""
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        """Fetch a single value."""
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=timeout)

    @database_error_handler("check schema existence")
    async def schema_exists(self, schema_name: str) -> bool:
        return bool(await self.fetchval(SCHEMA_EXISTENCE_CHECK, schema_name))

    @database_error_handler("list schema tables")
    async def list_tables(self, schema_name: str) -> List[str]:
        rows = await self.fetch(SCHEMA_TABLES_LIST, schema_name)
        return [row["table_name"] for row in rows]

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.acquire() as connection:
                result = await connection.fetchval(HEALTH_CHECK)
                return result == 1
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
