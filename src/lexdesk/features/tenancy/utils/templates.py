"""Schema template expansion.

Every tenant-scoped query is written once as a template containing the
``{schema}`` token. The token is replaced by the double-quoted schema
identifier; bound ``$n`` parameters and any other braces (JSON literals,
``'{}'::jsonb`` defaults) are left untouched because substitution is a
plain string replace, not ``str.format``.
"""

import re
import logging
from typing import Optional

from ....config.constants import MAX_IDENTIFIER_LENGTH
from ....core.exceptions import InvalidSchemaError

logger = logging.getLogger(__name__)

SCHEMA_PLACEHOLDER = "{schema}"

VALID_SCHEMA_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


def validate_schema_identifier(schema_name: str, required_prefix: Optional[str] = None) -> str:
    """Return ``schema_name`` unchanged if it is a safe identifier.

    Raises:
        InvalidSchemaError: empty, too long, outside ``[a-z0-9_]``, not
            starting with a letter, or missing ``required_prefix``
    """
    if not schema_name:
        raise InvalidSchemaError(str(schema_name), "schema name is empty")
    if len(schema_name) > MAX_IDENTIFIER_LENGTH:
        raise InvalidSchemaError(
            schema_name, f"longer than {MAX_IDENTIFIER_LENGTH} characters"
        )
    if not VALID_SCHEMA_PATTERN.match(schema_name):
        logger.warning(f"Schema name '{schema_name}' failed pattern validation")
        raise InvalidSchemaError(
            schema_name, "only lowercase letters, digits and underscores are allowed"
        )
    if required_prefix and not schema_name.startswith(required_prefix):
        raise InvalidSchemaError(schema_name, f"must start with '{required_prefix}'")
    return schema_name


def quote_identifier(schema_name: str) -> str:
    """Double-quote a validated identifier."""
    return f'"{validate_schema_identifier(schema_name)}"'


def expand(template: str, schema_name: str) -> str:
    """Replace every ``{schema}`` token with the quoted schema identifier.

    >>> expand('SELECT * FROM {schema}.clients WHERE id = $1', 'tenant_a')
    'SELECT * FROM "tenant_a".clients WHERE id = $1'
    """
    return template.replace(SCHEMA_PLACEHOLDER, quote_identifier(schema_name))


class SchemaTemplateExpander:
    """Expander bound to a tenant schema prefix.

    Used by the query executor and the provisioner so that only names
    inside the tenant namespace can ever be substituted.
    """

    def __init__(self, required_prefix: Optional[str] = None):
        self.required_prefix = required_prefix

    def validate(self, schema_name: str) -> str:
        return validate_schema_identifier(schema_name, self.required_prefix)

    def quote(self, schema_name: str) -> str:
        return f'"{self.validate(schema_name)}"'

    def expand(self, template: str, schema_name: str) -> str:
        if SCHEMA_PLACEHOLDER not in template:
            # Admin or catalog query, nothing to route
            return template
        return template.replace(SCHEMA_PLACEHOLDER, self.quote(schema_name))
