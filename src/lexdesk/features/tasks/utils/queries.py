"""Task statistics and chart queries."""

TASK_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'completed') AS completed,
        COUNT(*) FILTER (WHERE status = 'in_progress') AS in_progress,
        COUNT(*) FILTER (WHERE status = 'not_started') AS not_started,
        COUNT(*) FILTER (WHERE priority = 'urgent') AS urgent
    FROM {schema}.tasks
    WHERE is_active = TRUE
"""

TASKS_BY_STATUS_AND_PRIORITY = """
    SELECT
        status,
        priority,
        COUNT(*) AS count,
        AVG(progress) AS avg_progress
    FROM {schema}.tasks
    WHERE is_active = TRUE AND created_at >= $1
    GROUP BY status, priority
    ORDER BY status, priority
"""
