"""Transaction statistics and chart queries."""

TRANSACTION_STATS = """
    SELECT
        COALESCE(SUM(amount) FILTER (WHERE type = 'income'), 0) AS total_income,
        COALESCE(SUM(amount) FILTER (WHERE type = 'expense'), 0) AS total_expense,
        COALESCE(SUM(amount) FILTER (
            WHERE type = 'income' AND date >= DATE_TRUNC('month', NOW())
        ), 0) AS this_month_income,
        COALESCE(SUM(amount) FILTER (
            WHERE type = 'expense' AND date >= DATE_TRUNC('month', NOW())
        ), 0) AS this_month_expense
    FROM {schema}.transactions
    WHERE is_active = TRUE AND status <> 'cancelled'
"""

TRANSACTIONS_BY_CATEGORY = """
    SELECT
        category,
        type,
        COUNT(*) AS count,
        COALESCE(SUM(amount), 0) AS total
    FROM {schema}.transactions
    WHERE is_active = TRUE AND status <> 'cancelled' AND date >= $1
    GROUP BY category, type
    ORDER BY total DESC
"""

CASH_FLOW_BY_DAY = """
    SELECT
        date AS day,
        COALESCE(SUM(amount) FILTER (WHERE type = 'income'), 0) AS income,
        COALESCE(SUM(amount) FILTER (WHERE type = 'expense'), 0) AS expense
    FROM {schema}.transactions
    WHERE is_active = TRUE AND status <> 'cancelled' AND date >= $1
    GROUP BY date
    ORDER BY day ASC
"""
