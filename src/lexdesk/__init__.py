"""lexdesk - schema-per-tenant data layer for a legal practice back office.

Every tenant's data lives in its own PostgreSQL schema. Repositories write
SQL templates containing a ``{schema}`` placeholder; the tenant query
executor resolves the tenant, makes sure its schema exists and expands the
template into the quoted schema identifier before running it.
"""

from .__version__ import __version__

__all__ = ["__version__"]
