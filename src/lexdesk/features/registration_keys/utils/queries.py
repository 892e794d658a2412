"""Registration key queries. ``{schema}`` is the admin schema."""

KEY_COLUMNS = """
    id, key_hash, tenant_id, account_type, uses_allowed, uses_left,
    single_use, expires_at, metadata, used_logs, revoked, created_by,
    created_at, updated_at
"""

KEY_INSERT = f"""
    INSERT INTO {{schema}}.registration_keys (
        id, key_hash, tenant_id, account_type, uses_allowed, uses_left,
        single_use, expires_at, metadata, used_logs, revoked, created_by
    )
    VALUES ($1, $2, $3, $4, $5, $5, $6, $7, $8::jsonb, '[]'::jsonb, FALSE, $9)
    RETURNING {KEY_COLUMNS}
"""

KEY_GET_BY_ID = f"""
    SELECT {KEY_COLUMNS}
    FROM {{schema}}.registration_keys
    WHERE id = $1
"""

KEY_LOCK_BY_HASH = f"""
    SELECT {KEY_COLUMNS}
    FROM {{schema}}.registration_keys
    WHERE key_hash = $1
    FOR UPDATE
"""

KEY_LIST = f"""
    SELECT {KEY_COLUMNS}
    FROM {{schema}}.registration_keys
    ORDER BY created_at DESC, id DESC
"""

KEY_LIST_BY_TENANT = f"""
    SELECT {KEY_COLUMNS}
    FROM {{schema}}.registration_keys
    WHERE tenant_id = $1
    ORDER BY created_at DESC, id DESC
"""

KEY_REVOKE = """
    UPDATE {schema}.registration_keys
    SET revoked = TRUE, updated_at = NOW()
    WHERE id = $1
"""

KEY_RECORD_USE = f"""
    UPDATE {{schema}}.registration_keys
    SET uses_left = uses_left - 1,
        used_logs = COALESCE(used_logs, '[]'::jsonb) || $2::jsonb,
        updated_at = NOW()
    WHERE id = $1 AND uses_left > 0
    RETURNING {KEY_COLUMNS}
"""

KEY_COUNT_BY_ACCOUNT_TYPE = """
    SELECT account_type, COUNT(*) AS total
    FROM {schema}.registration_keys
    GROUP BY account_type
    ORDER BY account_type
"""
