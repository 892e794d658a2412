"""Catalog queries used by the store."""

SCHEMA_EXISTENCE_CHECK = """
    SELECT EXISTS(
        SELECT 1 FROM information_schema.schemata
        WHERE schema_name = $1
    )
"""

SCHEMA_TABLES_LIST = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = $1 AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

HEALTH_CHECK = "SELECT 1"
