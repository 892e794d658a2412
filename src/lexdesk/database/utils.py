"""
Database utility functions for record handling.
"""

from typing import Any, Dict, Iterable, Optional
import json
from uuid import UUID


# JSONB columns that hold objects
JSON_OBJECT_FIELDS = ("metadata", "data", "settings")

# JSONB columns that hold arrays
JSON_LIST_FIELDS = ("tags", "used_logs", "attachments", "items")


def process_database_record(
    data: Any,  # Can be Dict or asyncpg.Record
    jsonb_fields: Optional[Iterable[str]] = None,
    list_jsonb_fields: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Convert a database row into a plain dictionary.

    - asyncpg.Record becomes dict
    - UUID values become strings
    - JSONB columns returned as text (no codec registered) are parsed;
      NULL object columns become ``{}`` and NULL list columns become ``[]``

    Args:
        data: Raw database record (Dict or asyncpg.Record)
        jsonb_fields: Columns holding JSON objects
        list_jsonb_fields: Columns holding JSON arrays

    Returns:
        Processed row
    """
    row = dict(data.items()) if hasattr(data, "items") else dict(data)

    for key, value in row.items():
        if isinstance(value, UUID):
            row[key] = str(value)

    object_fields = JSON_OBJECT_FIELDS if jsonb_fields is None else tuple(jsonb_fields)
    list_fields = JSON_LIST_FIELDS if list_jsonb_fields is None else tuple(list_jsonb_fields)

    for field in object_fields:
        if field in row:
            row[field] = parse_json(row[field], default={})

    for field in list_fields:
        if field in row:
            row[field] = parse_json(row[field], default=[])

    return row


def parse_json(value: Any, default: Any = None) -> Any:
    """Decode JSON text returned without a codec; NULL or empty text gives ``default``."""
    if value is None:
        return default
    if isinstance(value, str):
        if not value:
            return default
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            # Not JSON after all, leave as is
            return value
    return value


def to_jsonb(value: Any) -> Optional[str]:
    """Serialize a value for a ``$n::jsonb`` parameter."""
    if value is None:
        return None
    return json.dumps(value, default=str)


def to_int(value: Any) -> int:
    """Aggregate result as int; NULL becomes 0."""
    return int(value) if value is not None else 0


def to_float(value: Any) -> float:
    """Aggregate result (NUMERIC/Decimal) as float; NULL becomes 0.0."""
    return float(value) if value is not None else 0.0
