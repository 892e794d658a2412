"""
Base repository for tenant-scoped tables.

Every module repository extends ``TenantScopedRepository``. The tenant is
an argument of each call and is never stored on the repository, so one
instance serves all tenants concurrently. SQL is built as ``{schema}``
templates and handed to the tenant query executor; filter values are
always bound as positional parameters.
"""

import logging
import secrets
import string
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.entities import TenantRecord
from ..core.exceptions import EntityNotFoundError, ValidationError
from ..database.utils import parse_json, to_jsonb
from ..features.pagination import (
    ListFilters,
    OffsetPaginationRequest,
    OffsetPaginationResponse,
)
from ..features.pagination.entities.requests import DEFAULT_SORT
from ..features.tenancy.services.query_executor import TenantQueryExecutor
from ..features.tenancy.utils.schema_definitions import TableDefinition

T = TypeVar("T", bound=TenantRecord)

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits


class RecordState(str, Enum):
    """Which rows an operation sees. Soft-deleted rows have ``is_active = FALSE``."""
    ACTIVE = "active"
    DELETED = "deleted"

    @property
    def is_active(self) -> bool:
        return self == RecordState.ACTIVE


def generate_record_id(prefix: str) -> str:
    """``<prefix>_<epoch ms>_<7 random base36 chars>``, e.g. ``client_1718000000000_k3j9x0a``."""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(7))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class WhereBuilder:
    """Accumulates AND-ed conditions and their positional parameters."""

    def __init__(self, param_offset: int = 0):
        self.conditions: List[str] = []
        self.params: List[Any] = []
        self._offset = param_offset

    def next_placeholder(self) -> str:
        return f"${self._offset + len(self.params) + 1}"

    def add(self, template: str, value: Any) -> "WhereBuilder":
        """``template`` contains one ``{p}`` standing for the next placeholder."""
        placeholder = self.next_placeholder()
        self.params.append(value)
        self.conditions.append(template.replace("{p}", placeholder))
        return self

    def equals(self, column: str, value: Any) -> "WhereBuilder":
        return self.add(f"{column} = {{p}}", value)

    @property
    def next_index(self) -> int:
        return self._offset + len(self.params) + 1

    def sql(self) -> str:
        return " AND ".join(self.conditions) if self.conditions else "TRUE"


class TenantScopedRepository(ABC, Generic[T]):
    """CRUD, filtering, pagination and soft delete for one tenant table.

    Subclasses set:
        table: canonical table definition
        entity: ``TenantRecord`` subclass built from rows
        id_prefix: prefix of generated ids
        create_model / update_model: pydantic models validating writes
        search_columns: columns matched by ``ListFilters.search``
        date_column: column used by ``date_from`` / ``date_to``
        scope_column: column that must match the caller (per-user tables)
    """

    table: TableDefinition
    entity: Type[T]
    id_prefix: str
    create_model: Type[BaseModel]
    update_model: Type[BaseModel]
    search_columns: Tuple[str, ...] = ()
    date_column: str = "created_at"
    scope_column: Optional[str] = None

    # Zero-valued statistics, returned when a module is degraded
    STATS_DEFAULTS: Dict[str, Any] = {}

    def __init__(self, executor: TenantQueryExecutor, default_page_size: int = 50, max_page_size: int = 1000):
        self._executor = executor
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._columns = frozenset(self.table.column_names)
        # JSONB column -> empty value used for NULL
        self._json_defaults: Dict[str, Any] = {
            column.name: [] if (column.default or "").startswith("'[]'") else {}
            for column in self.table.columns
            if column.sql_type == "JSONB"
        }
        self._json_columns = frozenset(self._json_defaults)

    @property
    def entity_name(self) -> str:
        return self.entity.__name__

    @property
    def qualified_table(self) -> str:
        return self.table.qualified_name

    @classmethod
    def empty_stats(cls) -> Dict[str, Any]:
        return dict(cls.STATS_DEFAULTS)

    def generate_id(self) -> str:
        return generate_record_id(self.id_prefix)

    def pagination(self, page: int = 1, limit: Optional[int] = None) -> OffsetPaginationRequest:
        return OffsetPaginationRequest(
            page=page,
            per_page=limit or self._default_page_size,
            max_per_page=self._max_page_size,
        )

    # Validation

    def _validate(self, model: Type[BaseModel], data: Any) -> Dict[str, Any]:
        if isinstance(data, model):
            validated = data
        else:
            try:
                validated = model.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, f"Invalid {self.entity_name} data") from e
        return validated.to_columns()

    def _check_column(self, column: str, field: str) -> str:
        if column not in self._columns:
            raise ValidationError(
                f"Unknown filter '{field}' for {self.entity_name}",
                field_errors=[{"field": field, "message": "unknown column"}],
            )
        return column

    def _to_entity(self, row: Dict[str, Any]) -> T:
        for column, empty in self._json_defaults.items():
            if column in row:
                row[column] = parse_json(row[column], default=type(empty)())
        return self.entity.from_row(row)

    def _value(self, column: str, value: Any) -> Tuple[str, Any]:
        """Placeholder suffix and bound value for a column write."""
        if column in self._json_columns:
            return "::jsonb", to_jsonb(value)
        return "", value

    # Query building

    def _scope(self, scope_value: Optional[str]) -> Dict[str, Any]:
        if self.scope_column is None:
            return {}
        if not scope_value:
            raise ValidationError(
                f"{self.entity_name} access requires {self.scope_column}",
                field_errors=[{"field": self.scope_column, "message": "required"}],
            )
        return {self.scope_column: scope_value}

    def build_where(
        self,
        filters: Optional[ListFilters] = None,
        state: RecordState = RecordState.ACTIVE,
        scope_value: Optional[str] = None,
        param_offset: int = 0,
    ) -> WhereBuilder:
        where = WhereBuilder(param_offset)
        where.equals("is_active", state.is_active)

        for column, value in self._scope(scope_value).items():
            where.equals(column, value)

        if filters is None:
            return where

        if filters.status:
            where.equals(self._check_column("status", "status"), filters.status)
        if filters.priority:
            where.equals(self._check_column("priority", "priority"), filters.priority)
        if filters.search and self.search_columns:
            # Every search column shares one bound pattern
            where.add(
                "(" + " OR ".join(f"{column} ILIKE {{p}}" for column in self.search_columns) + ")",
                f"%{filters.search.strip()}%",
            )
        if filters.tags:
            where.add(f"{self._check_column('tags', 'tags')} ?| {{p}}::text[]", list(filters.tags))
        if filters.date_from:
            where.add(f"{self.date_column} >= {{p}}", filters.date_from)
        if filters.date_to:
            where.add(f"{self.date_column} <= {{p}}", filters.date_to)
        for key, value in filters.extra.items():
            if value is None:
                continue
            where.equals(self._check_column(key, key), value)
        return where

    def order_by(self) -> str:
        return "ORDER BY " + ", ".join(field.to_sql() for field in DEFAULT_SORT)

    # Operations

    async def list(
        self,
        tenant_id: str,
        filters: Optional[ListFilters] = None,
        pagination: Optional[OffsetPaginationRequest] = None,
        state: RecordState = RecordState.ACTIVE,
        scope_value: Optional[str] = None,
    ) -> OffsetPaginationResponse[T]:
        """Filtered page of records plus the total matching count."""
        pagination = pagination or self.pagination()
        where = self.build_where(filters, state, scope_value)

        count_query = f"SELECT COUNT(*) AS total FROM {self.qualified_table} WHERE {where.sql()}"
        total = await self._executor.fetch_value(tenant_id, count_query, where.params)

        limit_index = where.next_index
        list_query = (
            f"SELECT * FROM {self.qualified_table} WHERE {where.sql()} "
            f"{self.order_by()} LIMIT ${limit_index} OFFSET ${limit_index + 1}"
        )
        rows = await self._executor.execute(
            tenant_id, list_query, [*where.params, pagination.limit, pagination.offset]
        )
        return OffsetPaginationResponse(
            items=[self._to_entity(row) for row in rows],
            total=int(total or 0),
            page=pagination.page,
            per_page=pagination.per_page,
        )

    async def find(
        self,
        tenant_id: str,
        record_id: str,
        scope_value: Optional[str] = None,
        state: RecordState = RecordState.ACTIVE,
    ) -> Optional[T]:
        where = self.build_where(state=state, scope_value=scope_value, param_offset=1)
        query = f"SELECT * FROM {self.qualified_table} WHERE id = $1 AND {where.sql()}"
        row = await self._executor.fetch_one(tenant_id, query, [record_id, *where.params])
        return self._to_entity(row) if row else None

    async def get(self, tenant_id: str, record_id: str, scope_value: Optional[str] = None) -> T:
        """Fetch one active record.

        Raises:
            EntityNotFoundError: no active record with this id (in the caller's scope)
        """
        record = await self.find(tenant_id, record_id, scope_value)
        if record is None:
            raise EntityNotFoundError(self.entity_name, record_id)
        return record

    async def create(
        self,
        tenant_id: str,
        data: Any,
        created_by: Optional[str] = None,
        scope_value: Optional[str] = None,
    ) -> T:
        """Validate and insert a record with a generated id."""
        values = self._validate(self.create_model, data)
        values.update(self._scope(scope_value))
        values["id"] = self.generate_id()
        if created_by is not None and "created_by" in self._columns:
            values["created_by"] = created_by
        return await self._insert(tenant_id, values)

    async def _insert(self, tenant_id: str, values: Dict[str, Any]) -> T:
        columns: List[str] = []
        placeholders: List[str] = []
        params: List[Any] = []
        for index, (column, value) in enumerate(values.items(), start=1):
            cast, bound = self._value(column, value)
            columns.append(column)
            placeholders.append(f"${index}{cast}")
            params.append(bound)

        query = (
            f"INSERT INTO {self.qualified_table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(placeholders)}) RETURNING *"
        )
        row = await self._executor.fetch_one(tenant_id, query, params)
        logger.debug(f"[{tenant_id}] created {self.entity_name} {values['id']}")
        return self._to_entity(row)

    async def update(
        self,
        tenant_id: str,
        record_id: str,
        changes: Any,
        scope_value: Optional[str] = None,
    ) -> T:
        """Apply a partial update to an active record.

        Raises:
            ValidationError: nothing to update, or invalid values
            EntityNotFoundError: no active record with this id
        """
        values = self._validate(self.update_model, changes)
        if not values:
            raise ValidationError(f"No {self.entity_name} fields to update")
        return await self._update_columns(tenant_id, record_id, values, scope_value)

    async def _update_columns(
        self,
        tenant_id: str,
        record_id: str,
        values: Dict[str, Any],
        scope_value: Optional[str] = None,
        raw_assignments: Sequence[str] = (),
    ) -> T:
        assignments: List[str] = []
        params: List[Any] = [record_id]
        for column, value in values.items():
            cast, bound = self._value(column, value)
            params.append(bound)
            assignments.append(f"{column} = ${len(params)}{cast}")
        assignments.extend(raw_assignments)
        assignments.append("updated_at = NOW()")

        where = self.build_where(scope_value=scope_value, param_offset=len(params))
        params.extend(where.params)
        query = (
            f"UPDATE {self.qualified_table} SET {', '.join(assignments)} "
            f"WHERE id = $1 AND {where.sql()} RETURNING *"
        )
        row = await self._executor.fetch_one(tenant_id, query, params)
        if row is None:
            raise EntityNotFoundError(self.entity_name, record_id)
        return self._to_entity(row)

    async def soft_delete(self, tenant_id: str, record_id: str, scope_value: Optional[str] = None) -> None:
        """Mark an active record deleted. The row stays in the table."""
        where = self.build_where(scope_value=scope_value, param_offset=1)
        query = (
            f"UPDATE {self.qualified_table} SET is_active = FALSE, updated_at = NOW() "
            f"WHERE id = $1 AND {where.sql()}"
        )
        status = await self._executor.run(tenant_id, query, [record_id, *where.params])
        if status.split()[-1] == "0":
            raise EntityNotFoundError(self.entity_name, record_id)
        logger.info(f"[{tenant_id}] soft-deleted {self.entity_name} {record_id}")

    async def recent(self, tenant_id: str, limit: int = 5, scope_value: Optional[str] = None) -> List[T]:
        """Newest active records."""
        page = await self.list(tenant_id, pagination=self.pagination(1, limit), scope_value=scope_value)
        return page.items

    @abstractmethod
    async def stats(self, tenant_id: str, scope_value: Optional[str] = None) -> Dict[str, Any]:
        """Module statistics with the same keys as ``STATS_DEFAULTS``."""
