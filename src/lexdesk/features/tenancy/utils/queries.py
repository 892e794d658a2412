"""Admin schema queries for tenants.

``{schema}`` here is the admin schema, expanded once by the tenant
repository; tenant data queries live with their modules.
"""

TENANT_COLUMNS = """
    id, name, schema_name, plan_type, max_users, max_storage_mb,
    is_active, created_at, updated_at
"""

TENANT_GET_BY_ID = f"""
    SELECT {TENANT_COLUMNS}
    FROM {{schema}}.tenants
    WHERE id = $1
"""

TENANT_SCHEMA_LOOKUP = """
    SELECT schema_name, is_active
    FROM {schema}.tenants
    WHERE id = $1
"""

TENANT_INSERT = f"""
    INSERT INTO {{schema}}.tenants (
        id, name, schema_name, plan_type, max_users, max_storage_mb, is_active
    )
    VALUES ($1, $2, $3, $4, $5, $6, TRUE)
    RETURNING {TENANT_COLUMNS}
"""

TENANT_SET_ACTIVE = f"""
    UPDATE {{schema}}.tenants
    SET is_active = $2, updated_at = NOW()
    WHERE id = $1
    RETURNING {TENANT_COLUMNS}
"""

TENANT_DELETE = """
    DELETE FROM {schema}.tenants WHERE id = $1
"""

TENANT_LIST = f"""
    SELECT {TENANT_COLUMNS}
    FROM {{schema}}.tenants
    ORDER BY created_at DESC, id DESC
    LIMIT $1 OFFSET $2
"""

TENANT_LIST_ACTIVE = f"""
    SELECT {TENANT_COLUMNS}
    FROM {{schema}}.tenants
    WHERE is_active = TRUE
    ORDER BY created_at, id
"""

TENANT_COUNT = """
    SELECT COUNT(*) AS total FROM {schema}.tenants
"""

TENANT_STATUS_COUNTS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE is_active = TRUE) AS active
    FROM {schema}.tenants
"""

# Expanded with the tenant's own schema, not the admin schema
TENANT_MODULE_COUNTS = """
    SELECT
        (SELECT COUNT(*) FROM {schema}.clients WHERE is_active = TRUE) AS clients,
        (SELECT COUNT(*) FROM {schema}.projects WHERE is_active = TRUE) AS projects,
        (SELECT COUNT(*) FROM {schema}.tasks WHERE is_active = TRUE) AS tasks,
        (SELECT COUNT(*) FROM {schema}.transactions WHERE is_active = TRUE) AS transactions,
        (SELECT COUNT(*) FROM {schema}.invoices WHERE is_active = TRUE) AS invoices
"""
