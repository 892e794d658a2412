"""Canonical table definitions.

This module is the only place table shapes are declared. The provisioner
renders CREATE TABLE, repair (ADD COLUMN IF NOT EXISTS) and CREATE INDEX
templates from these definitions; repositories only ever reference the
table and column names.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .templates import SCHEMA_PLACEHOLDER


@dataclass(frozen=True)
class ColumnDefinition:
    """One column. Constraints are applied on create, not on repair."""

    name: str
    sql_type: str
    nullable: bool = True
    default: Optional[str] = None
    primary_key: bool = False
    unique: bool = False
    check: Optional[str] = None

    def create_sql(self) -> str:
        parts = [self.name, self.sql_type]
        if self.primary_key:
            parts.append("PRIMARY KEY")
        if not self.nullable and not self.primary_key:
            parts.append("NOT NULL")
        if self.unique:
            parts.append("UNIQUE")
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        if self.check:
            parts.append(f"CHECK ({self.check})")
        return " ".join(parts)

    def repair_sql(self) -> str:
        # Existing rows would violate NOT NULL, so repair adds the bare column
        parts = [self.name, self.sql_type]
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        return " ".join(parts)


@dataclass(frozen=True)
class IndexDefinition:
    suffix: str
    columns: Tuple[str, ...]


@dataclass(frozen=True)
class TableDefinition:
    """A table and everything needed to create or repair it."""

    name: str
    columns: Tuple[ColumnDefinition, ...]
    indexes: Tuple[IndexDefinition, ...] = ()
    table_constraints: Tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{SCHEMA_PLACEHOLDER}.{self.name}"

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def column(self, name: str) -> ColumnDefinition:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    def create_table_template(self) -> str:
        body = [f"    {column.create_sql()}" for column in self.columns]
        body.extend(f"    {constraint}" for constraint in self.table_constraints)
        return (
            f"CREATE TABLE IF NOT EXISTS {self.qualified_name} (\n"
            + ",\n".join(body)
            + "\n)"
        )

    def repair_templates(self) -> List[str]:
        return [
            f"ALTER TABLE {self.qualified_name} ADD COLUMN IF NOT EXISTS {column.repair_sql()}"
            for column in self.columns
            if not column.primary_key
        ]

    def index_templates(self) -> List[str]:
        return [
            f"CREATE INDEX IF NOT EXISTS idx_{self.name}_{index.suffix} "
            f"ON {self.qualified_name} ({', '.join(index.columns)})"
            for index in self.indexes
        ]


def _audit_columns(created_by_required: bool = False) -> Tuple[ColumnDefinition, ...]:
    return (
        ColumnDefinition("created_by", "VARCHAR", nullable=not created_by_required),
        ColumnDefinition("is_active", "BOOLEAN", default="TRUE"),
        ColumnDefinition("created_at", "TIMESTAMPTZ", default="NOW()"),
        ColumnDefinition("updated_at", "TIMESTAMPTZ", default="NOW()"),
    )


def _index(*columns: str, suffix: Optional[str] = None) -> IndexDefinition:
    return IndexDefinition(suffix or "_".join(columns), tuple(columns))


ID = ColumnDefinition("id", "VARCHAR", primary_key=True)
TAGS = ColumnDefinition("tags", "JSONB", default="'[]'::jsonb")
ACTIVE_INDEX = _index("is_active", suffix="active")
CREATED_INDEX = _index("created_at")


CLIENTS = TableDefinition(
    name="clients",
    columns=(
        ID,
        ColumnDefinition("name", "VARCHAR(255)", nullable=False),
        ColumnDefinition("email", "VARCHAR(255)"),
        ColumnDefinition("phone", "VARCHAR(50)"),
        ColumnDefinition("document", "VARCHAR(50)"),
        ColumnDefinition("address", "TEXT"),
        ColumnDefinition("city", "VARCHAR(100)"),
        ColumnDefinition("state", "VARCHAR(50)"),
        ColumnDefinition("postal_code", "VARCHAR(20)"),
        ColumnDefinition("country", "VARCHAR(100)", default="'Brasil'"),
        ColumnDefinition("status", "VARCHAR(50)", default="'active'"),
        ColumnDefinition("type", "VARCHAR(50)", default="'individual'"),
        ColumnDefinition("notes", "TEXT"),
        TAGS,
    ) + _audit_columns(),
    indexes=(_index("name"), _index("status"), ACTIVE_INDEX, CREATED_INDEX),
)

PROJECTS = TableDefinition(
    name="projects",
    columns=(
        ID,
        ColumnDefinition("title", "VARCHAR(255)", nullable=False),
        ColumnDefinition("description", "TEXT"),
        ColumnDefinition("client_name", "VARCHAR(255)"),
        ColumnDefinition("client_id", "VARCHAR"),
        ColumnDefinition("organization", "VARCHAR(255)"),
        ColumnDefinition("address", "TEXT"),
        ColumnDefinition("budget", "NUMERIC(15,2)"),
        ColumnDefinition("currency", "VARCHAR(3)", default="'BRL'"),
        ColumnDefinition("status", "VARCHAR(50)", default="'contacted'"),
        ColumnDefinition("priority", "VARCHAR(20)", default="'medium'"),
        ColumnDefinition("start_date", "DATE"),
        ColumnDefinition("due_date", "DATE"),
        ColumnDefinition("progress", "INTEGER", default="0"),
        TAGS,
        ColumnDefinition("assigned_to", "JSONB", default="'[]'::jsonb"),
        ColumnDefinition("contacts", "JSONB", default="'[]'::jsonb"),
        ColumnDefinition("notes", "TEXT"),
    ) + _audit_columns(created_by_required=True),
    indexes=(
        _index("title"),
        _index("client_name"),
        _index("status"),
        _index("priority"),
        ACTIVE_INDEX,
        _index("created_by"),
        CREATED_INDEX,
    ),
)

TASKS = TableDefinition(
    name="tasks",
    columns=(
        ID,
        ColumnDefinition("title", "VARCHAR(255)", nullable=False),
        ColumnDefinition("description", "TEXT"),
        ColumnDefinition("project_id", "VARCHAR"),
        ColumnDefinition("project_title", "VARCHAR(255)"),
        ColumnDefinition("client_id", "VARCHAR"),
        ColumnDefinition("client_name", "VARCHAR(255)"),
        ColumnDefinition("assigned_to", "VARCHAR", nullable=False),
        ColumnDefinition(
            "status", "VARCHAR(20)", default="'not_started'",
            check="status IN ('not_started', 'in_progress', 'completed', 'on_hold', 'cancelled')",
        ),
        ColumnDefinition(
            "priority", "VARCHAR(20)", default="'medium'",
            check="priority IN ('low', 'medium', 'high', 'urgent')",
        ),
        ColumnDefinition("start_date", "TIMESTAMPTZ"),
        ColumnDefinition("end_date", "TIMESTAMPTZ"),
        ColumnDefinition("completed_at", "TIMESTAMPTZ"),
        ColumnDefinition("estimated_hours", "NUMERIC(7,2)"),
        ColumnDefinition("actual_hours", "NUMERIC(7,2)"),
        ColumnDefinition(
            "progress", "INTEGER", default="0", check="progress >= 0 AND progress <= 100",
        ),
        TAGS,
        ColumnDefinition("notes", "TEXT"),
        ColumnDefinition("subtasks", "JSONB", default="'[]'::jsonb"),
    ) + _audit_columns(created_by_required=True),
    indexes=(
        _index("assigned_to"),
        _index("status"),
        _index("priority"),
        _index("project_id"),
        _index("client_id"),
        CREATED_INDEX,
        ACTIVE_INDEX,
    ),
)

TRANSACTIONS = TableDefinition(
    name="transactions",
    columns=(
        ID,
        ColumnDefinition("type", "VARCHAR(20)", nullable=False, check="type IN ('income', 'expense')"),
        ColumnDefinition("category", "VARCHAR(255)", nullable=False),
        ColumnDefinition("category_id", "VARCHAR"),
        ColumnDefinition("amount", "NUMERIC(15,2)", nullable=False),
        ColumnDefinition("description", "TEXT"),
        ColumnDefinition("date", "DATE", nullable=False),
        ColumnDefinition("project_id", "VARCHAR"),
        ColumnDefinition("client_id", "VARCHAR"),
        ColumnDefinition("payment_method", "VARCHAR(50)"),
        ColumnDefinition("status", "VARCHAR(50)", default="'confirmed'"),
        TAGS,
        ColumnDefinition("is_recurring", "BOOLEAN", default="FALSE"),
        ColumnDefinition("recurring_frequency", "VARCHAR(20)"),
        ColumnDefinition("attachments", "JSONB", default="'[]'::jsonb"),
        ColumnDefinition("notes", "TEXT"),
        ColumnDefinition("last_modified_by", "VARCHAR"),
    ) + _audit_columns(),
    indexes=(
        _index("type"),
        _index("date"),
        _index("category"),
        _index("status"),
        _index("project_id"),
        ACTIVE_INDEX,
    ),
)

INVOICES = TableDefinition(
    name="invoices",
    columns=(
        ID,
        ColumnDefinition("number", "VARCHAR(50)", nullable=False, unique=True),
        ColumnDefinition("client_id", "VARCHAR"),
        ColumnDefinition("client_name", "VARCHAR(255)"),
        ColumnDefinition("project_id", "VARCHAR"),
        ColumnDefinition("type", "VARCHAR(20)", default="'invoice'"),
        ColumnDefinition(
            "status", "VARCHAR(20)", default="'draft'",
            check="status IN ('draft', 'pending', 'paid', 'overdue', 'cancelled')",
        ),
        ColumnDefinition("amount", "NUMERIC(15,2)", nullable=False),
        ColumnDefinition("tax_amount", "NUMERIC(15,2)", default="0"),
        ColumnDefinition("total_amount", "NUMERIC(15,2)", nullable=False),
        ColumnDefinition("currency", "VARCHAR(3)", default="'BRL'"),
        ColumnDefinition("issue_date", "DATE", nullable=False),
        ColumnDefinition("due_date", "DATE", nullable=False),
        ColumnDefinition("paid_at", "TIMESTAMPTZ"),
        ColumnDefinition("description", "TEXT"),
        ColumnDefinition("items", "JSONB", default="'[]'::jsonb"),
        ColumnDefinition("payment_terms", "TEXT"),
        ColumnDefinition("notes", "TEXT"),
        TAGS,
    ) + _audit_columns(),
    indexes=(
        _index("status"),
        _index("client_id"),
        _index("due_date"),
        ACTIVE_INDEX,
        CREATED_INDEX,
    ),
)

PUBLICATIONS = TableDefinition(
    name="publications",
    columns=(
        ID,
        ColumnDefinition("user_id", "VARCHAR", nullable=False),
        ColumnDefinition("oab_number", "VARCHAR(30)", nullable=False),
        ColumnDefinition("process_number", "VARCHAR(50)"),
        ColumnDefinition("publication_date", "DATE", nullable=False),
        ColumnDefinition("content", "TEXT", nullable=False),
        ColumnDefinition(
            "source", "VARCHAR(20)", nullable=False,
            check="source IN ('CNJ-DATAJUD', 'Codilo', 'JusBrasil')",
        ),
        ColumnDefinition("external_id", "VARCHAR"),
        ColumnDefinition(
            "status", "VARCHAR(20)", default="'novo'",
            check="status IN ('novo', 'lido', 'arquivado')",
        ),
        TAGS,
    ) + _audit_columns(),
    indexes=(
        _index("user_id"),
        _index("oab_number"),
        _index("status"),
        _index("source"),
        _index("publication_date", suffix="date"),
        ACTIVE_INDEX,
    ),
    table_constraints=("UNIQUE (user_id, external_id)",),
)

NOTIFICATIONS = TableDefinition(
    name="notifications",
    columns=(
        ID,
        ColumnDefinition("user_id", "VARCHAR", nullable=False),
        ColumnDefinition(
            "type", "VARCHAR(20)", nullable=False,
            check="type IN ('info', 'success', 'warning', 'error', 'reminder')",
        ),
        ColumnDefinition("title", "VARCHAR(255)", nullable=False),
        ColumnDefinition("message", "TEXT", nullable=False),
        ColumnDefinition("data", "JSONB", default="'{}'::jsonb"),
        ColumnDefinition("read", "BOOLEAN", default="FALSE"),
        ColumnDefinition("read_at", "TIMESTAMPTZ"),
    ) + _audit_columns(),
    indexes=(
        _index("user_id"),
        _index("type"),
        _index("read"),
        CREATED_INDEX,
        ACTIVE_INDEX,
    ),
)

# Every tenant schema holds exactly these tables, in creation order
TENANT_TABLES: Tuple[TableDefinition, ...] = (
    CLIENTS,
    PROJECTS,
    TASKS,
    TRANSACTIONS,
    INVOICES,
    PUBLICATIONS,
    NOTIFICATIONS,
)


TENANTS = TableDefinition(
    name="tenants",
    columns=(
        ID,
        ColumnDefinition("name", "VARCHAR(255)", nullable=False),
        ColumnDefinition("schema_name", "VARCHAR(63)", nullable=False, unique=True),
        ColumnDefinition(
            "plan_type", "VARCHAR(20)", default="'SIMPLES'",
            check="plan_type IN ('SIMPLES', 'COMPOSTA', 'GERENCIAL')",
        ),
        ColumnDefinition("max_users", "INTEGER", default="5"),
        ColumnDefinition("max_storage_mb", "INTEGER", default="1024"),
        ColumnDefinition("is_active", "BOOLEAN", default="TRUE"),
        ColumnDefinition("created_at", "TIMESTAMPTZ", default="NOW()"),
        ColumnDefinition("updated_at", "TIMESTAMPTZ", default="NOW()"),
    ),
    indexes=(ACTIVE_INDEX,),
)

REGISTRATION_KEYS = TableDefinition(
    name="registration_keys",
    columns=(
        ID,
        ColumnDefinition("key_hash", "VARCHAR(64)", nullable=False, unique=True),
        ColumnDefinition("tenant_id", "VARCHAR"),
        ColumnDefinition("account_type", "VARCHAR(20)", nullable=False),
        ColumnDefinition("uses_allowed", "INTEGER", nullable=False, default="1"),
        ColumnDefinition("uses_left", "INTEGER", nullable=False, default="1"),
        ColumnDefinition("single_use", "BOOLEAN", default="TRUE"),
        ColumnDefinition("expires_at", "TIMESTAMPTZ"),
        ColumnDefinition("metadata", "JSONB", default="'{}'::jsonb"),
        ColumnDefinition("used_logs", "JSONB", default="'[]'::jsonb"),
        ColumnDefinition("revoked", "BOOLEAN", default="FALSE"),
        ColumnDefinition("created_by", "VARCHAR"),
        ColumnDefinition("created_at", "TIMESTAMPTZ", default="NOW()"),
        ColumnDefinition("updated_at", "TIMESTAMPTZ", default="NOW()"),
    ),
    indexes=(_index("tenant_id"), _index("revoked")),
)

ADMIN_TABLES: Tuple[TableDefinition, ...] = (TENANTS, REGISTRATION_KEYS)


def tables_by_name(tables: Tuple[TableDefinition, ...] = TENANT_TABLES) -> Dict[str, TableDefinition]:
    return {table.name: table for table in tables}
