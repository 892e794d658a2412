"""Notification queries. ``$1`` is the owning user unless noted."""

NOTIFICATION_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE read = FALSE) AS unread,
        COUNT(*) FILTER (WHERE read = TRUE) AS read
    FROM {schema}.notifications
    WHERE is_active = TRUE AND user_id = $1
"""

NOTIFICATION_UNREAD_COUNT = """
    SELECT COUNT(*) FROM {schema}.notifications
    WHERE is_active = TRUE AND user_id = $1 AND read = FALSE
"""

NOTIFICATION_MARK_ALL_READ = """
    UPDATE {schema}.notifications
    SET read = TRUE, read_at = NOW(), updated_at = NOW()
    WHERE is_active = TRUE AND user_id = $1 AND read = FALSE
"""

# $1 is the retention in days; applies to every user
NOTIFICATION_CLEANUP = """
    UPDATE {schema}.notifications
    SET is_active = FALSE, updated_at = NOW()
    WHERE is_active = TRUE AND created_at < NOW() - make_interval(days => $1)
"""
