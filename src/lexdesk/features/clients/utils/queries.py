"""Client statistics queries."""

CLIENT_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'active') AS active,
        COUNT(*) FILTER (WHERE status = 'inactive') AS inactive,
        COUNT(*) FILTER (WHERE created_at >= DATE_TRUNC('month', NOW())) AS this_month
    FROM {schema}.clients
    WHERE is_active = TRUE
"""
