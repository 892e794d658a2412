"""Pytest configuration and fixtures for lexdesk tests."""

import re
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from lexdesk.features.tenancy.entities.tenant import ProvisioningPolicy
from lexdesk.features.tenancy.repositories.schema_registry import TenantSchemaRegistry
from lexdesk.features.tenancy.services.provisioner import SchemaProvisioner
from lexdesk.features.tenancy.services.query_executor import TenantQueryExecutor


QUALIFIED_TABLE = re.compile(r'"(?P<schema>[a-z][a-z0-9_]*)"\.(?P<table>[a-z_]+)')
INSERT_COLUMNS = re.compile(r"INSERT INTO \S+ \((?P<columns>[^)]*)\)")


class InMemoryStore:
    """Store fake that understands the narrow SQL shapes lexdesk emits.

    Tenant rows live under ``(schema, table)``. Only the ``is_active``
    predicate, ordering and LIMIT/OFFSET of list queries are honoured;
    tests asserting on filter SQL use ``AsyncMock`` instead.
    """

    def __init__(self):
        self.schemas = {"public"}
        self.tables: Dict[str, set] = {"public": set()}
        self.rows: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.tenants: Dict[str, Dict[str, Any]] = {}
        self.executed: List[str] = []
        self.failures: Dict[str, BaseException] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # Test helpers

    def add_tenant(self, tenant_id: str, schema_name: Optional[str] = None, is_active: bool = True) -> str:
        schema_name = schema_name or f"tenant_{tenant_id.lower().replace('-', '_')}"
        self.tenants[tenant_id] = {"id": tenant_id, "schema_name": schema_name, "is_active": is_active}
        return schema_name

    def fail_when(self, fragment: str, error: BaseException) -> None:
        """Raise ``error`` for any statement containing ``fragment``."""
        self.failures[fragment] = error

    def table_rows(self, schema_name: str, table: str) -> List[Dict[str, Any]]:
        return self.rows.get((schema_name, table), [])

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _check_failures(self, query: str) -> None:
        for fragment, error in self.failures.items():
            if fragment in query:
                raise error

    def _target(self, query: str) -> Tuple[str, str]:
        match = QUALIFIED_TABLE.search(query)
        assert match, f"no qualified table in: {query}"
        schema_name, table = match.group("schema"), match.group("table")
        if schema_name not in self.schemas:
            raise asyncpg.InvalidSchemaNameError(f'schema "{schema_name}" does not exist')
        if table not in self.tables.get(schema_name, set()):
            raise asyncpg.UndefinedTableError(f'relation "{schema_name}.{table}" does not exist')
        return schema_name, table

    def _visible(self, query: str, args: Tuple[Any, ...]) -> List[Dict[str, Any]]:
        rows = self.table_rows(*self._target(query))
        if "is_active = $1" in query and args:
            rows = [row for row in rows if row["is_active"] == args[0]]
        return rows

    # Store protocol

    async def execute(self, query: str, *args: Any) -> str:
        self.executed.append(query)
        self._check_failures(query)
        text = " ".join(query.split())

        if text.startswith("CREATE SCHEMA"):
            schema_name = _schema_of(text)
            self.schemas.add(schema_name)
            self.tables.setdefault(schema_name, set())
            return "CREATE SCHEMA"
        if text.startswith("DROP SCHEMA"):
            schema_name = _schema_of(text)
            self.schemas.discard(schema_name)
            self.tables.pop(schema_name, None)
            for key in [key for key in self.rows if key[0] == schema_name]:
                del self.rows[key]
            return "DROP SCHEMA"
        if text.startswith("CREATE TABLE"):
            match = QUALIFIED_TABLE.search(text)
            schema_name = match.group("schema")
            if schema_name not in self.schemas:
                raise asyncpg.InvalidSchemaNameError(f'schema "{schema_name}" does not exist')
            self.tables[schema_name].add(match.group("table"))
            return "CREATE TABLE"
        if text.startswith("UPDATE") and "SET is_active = FALSE" in text:
            rows = self.table_rows(*self._target(text))
            for row in rows:
                if row["id"] == args[0] and row["is_active"]:
                    row["is_active"] = False
                    return "UPDATE 1"
            return "UPDATE 0"
        # Indexes, column repairs and other DDL
        return "OK"

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        self.executed.append(query)
        self._check_failures(query)
        rows = sorted(
            self._visible(query, args),
            key=lambda row: (row["created_at"], row["id"]),
            reverse=True,
        )
        if "LIMIT" in query:
            limit, offset = args[-2], args[-1]
            rows = rows[offset:offset + limit]
        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        self.executed.append(query)
        self._check_failures(query)
        text = " ".join(query.split())

        if '"public".tenants' in text:
            tenant = self.tenants.get(args[0])
            return dict(tenant) if tenant else None
        if text.startswith("INSERT INTO"):
            schema_name, table = self._target(text)
            columns = [column.strip() for column in INSERT_COLUMNS.search(text).group("columns").split(",")]
            now = self._tick()
            row = {"is_active": True, "created_at": now, "updated_at": now}
            row.update(zip(columns, args))
            self.rows.setdefault((schema_name, table), []).append(row)
            return dict(row)
        if "COUNT(" in text:
            return {"total": len(self._visible(text, args))}
        rows = await self.fetch(query, *args)
        return rows[0] if rows else None

    async def fetchval(self, query: str, *args: Any) -> Any:
        self.executed.append(query)
        self._check_failures(query)
        if "COUNT(" in query:
            return len(self._visible(query, args))
        row = await self.fetchrow(query, *args)
        return next(iter(row.values())) if row else None

    @asynccontextmanager
    async def transaction(self):
        yield self

    async def schema_exists(self, schema_name: str) -> bool:
        return schema_name in self.schemas

    async def list_tables(self, schema_name: str) -> List[str]:
        return sorted(self.tables.get(schema_name, set()))

    async def health_check(self) -> bool:
        return True


def _schema_of(text: str) -> str:
    return re.search(r'SCHEMA (?:IF (?:NOT )?EXISTS )?"([a-z][a-z0-9_]*)"', text).group(1)


@pytest.fixture
def mock_database_repository():
    """Mock store for testing SQL shapes."""
    mock_db = AsyncMock()
    mock_db.fetchrow = AsyncMock()
    mock_db.fetch = AsyncMock()
    mock_db.fetchval = AsyncMock()
    mock_db.execute = AsyncMock()
    mock_db.schema_exists = AsyncMock(return_value=True)
    mock_db.list_tables = AsyncMock(return_value=[])
    return mock_db


@pytest.fixture
def mock_executor():
    """Executor double recording the templates repositories hand to it."""
    executor = MagicMock(spec=TenantQueryExecutor)
    executor.execute = AsyncMock(return_value=[])
    executor.fetch_one = AsyncMock(return_value=None)
    executor.fetch_value = AsyncMock(return_value=0)
    executor.run = AsyncMock(return_value="UPDATE 1")
    executor.ensure_ready = AsyncMock()
    return executor


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def registry(store):
    return TenantSchemaRegistry(store)


@pytest.fixture
def provisioner(store, registry):
    return SchemaProvisioner(store, registry)


@pytest.fixture
def executor(store, registry, provisioner):
    """STRICT executor over the in-memory store."""
    return TenantQueryExecutor(store, registry, provisioner=provisioner)


@pytest.fixture
def lazy_executor(store, registry, provisioner):
    return TenantQueryExecutor(store, registry, provisioner=provisioner, policy=ProvisioningPolicy.LAZY)


@pytest.fixture
def sample_client_data():
    return {
        "name": "Alice Souza",
        "email": "alice@example.com",
        "phone": "+55 11 99999-0000",
        "tags": ["vip"],
    }
