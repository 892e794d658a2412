"""Invoice statistics and maintenance queries."""

INVOICE_STATS = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'paid') AS paid,
        COUNT(*) FILTER (WHERE status = 'pending') AS pending,
        COUNT(*) FILTER (WHERE status = 'overdue') AS overdue,
        COALESCE(SUM(total_amount) FILTER (WHERE status = 'paid'), 0) AS paid_amount,
        COALESCE(SUM(total_amount) FILTER (WHERE status IN ('pending', 'overdue')), 0) AS outstanding_amount
    FROM {schema}.invoices
    WHERE is_active = TRUE
"""

INVOICE_MARK_OVERDUE = """
    UPDATE {schema}.invoices
    SET status = 'overdue', updated_at = NOW()
    WHERE is_active = TRUE AND status = 'pending' AND due_date < $1
"""
