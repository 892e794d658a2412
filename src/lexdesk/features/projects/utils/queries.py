"""Project statistics and chart queries."""

PROJECT_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'contacted') AS contacted,
        COUNT(*) FILTER (WHERE status = 'proposal') AS proposal,
        COUNT(*) FILTER (WHERE status = 'won') AS won,
        COUNT(*) FILTER (WHERE status = 'lost') AS lost,
        COUNT(*) FILTER (WHERE created_at >= DATE_TRUNC('month', NOW())) AS this_month
    FROM {schema}.projects
    WHERE is_active = TRUE
"""

PROJECTS_BY_STATUS = """
    SELECT
        status,
        COUNT(*) AS count,
        COALESCE(SUM(budget), 0) AS total_budget
    FROM {schema}.projects
    WHERE is_active = TRUE AND created_at >= $1
    GROUP BY status
    ORDER BY status
"""
