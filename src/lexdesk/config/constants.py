"""Constants shared across lexdesk features."""

from enum import Enum


class DatabaseSchemas:
    """Default schema names."""
    ADMIN = "public"
    TENANT_PREFIX = "tenant_"


class AccountType(str, Enum):
    """Subscription tier of a tenant or user account."""
    SIMPLES = "SIMPLES"
    COMPOSTA = "COMPOSTA"
    GERENCIAL = "GERENCIAL"

    @property
    def has_financial_access(self) -> bool:
        """Financial modules are only visible to the upper tiers."""
        return self in (AccountType.COMPOSTA, AccountType.GERENCIAL)


# PostgreSQL NAMEDATALEN - 1
MAX_IDENTIFIER_LENGTH = 63

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000
