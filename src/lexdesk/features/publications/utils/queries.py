"""Publication statistics queries (always per user)."""

PUBLICATION_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'novo') AS novo,
        COUNT(*) FILTER (WHERE status = 'lido') AS lido,
        COUNT(*) FILTER (WHERE status = 'arquivado') AS arquivado,
        COUNT(*) FILTER (WHERE created_at >= DATE_TRUNC('month', NOW())) AS this_month
    FROM {schema}.publications
    WHERE is_active = TRUE AND user_id = $1
"""
