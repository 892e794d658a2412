"""Protocol the data layer expects from a store.

``DatabaseStore`` implements it over an asyncpg pool; tests substitute an
in-memory implementation.
"""

from typing import Any, AsyncContextManager, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Positional-parameter SQL store."""

    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement and return the command status string."""
        ...

    async def fetch(self, query: str, *args: Any) -> List[Any]:
        """Run a query and return all rows."""
        ...

    async def fetchrow(self, query: str, *args: Any) -> Optional[Any]:
        """Run a query and return the first row or None."""
        ...

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Run a query and return the first column of the first row."""
        ...

    def transaction(self) -> AsyncContextManager[Any]:
        """Yield a connection with an open transaction."""
        ...

    async def schema_exists(self, schema_name: str) -> bool:
        """Whether a schema with this exact name exists."""
        ...

    async def list_tables(self, schema_name: str) -> List[str]:
        """Names of the base tables in a schema."""
        ...
