"""Tenant validation rules and schema name derivation."""

import re
from typing import Any, Dict, List

from ....config.constants import DatabaseSchemas, MAX_IDENTIFIER_LENGTH
from ....core.exceptions import ValidationError
from .templates import validate_schema_identifier


class TenantValidationRules:
    """Centralized tenant validation rules."""

    TENANT_ID_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')

    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 255

    @classmethod
    def normalize_tenant_id(cls, tenant_id: str) -> str:
        """Lowercase and map hyphens to underscores (UUIDs become valid identifiers)."""
        return tenant_id.strip().lower().replace("-", "_")

    @classmethod
    def validate_tenant_id(cls, tenant_id: str, prefix: str = DatabaseSchemas.TENANT_PREFIX) -> None:
        """Check that the id can become a schema name under ``prefix``.

        Raises:
            ValidationError: If the id is empty, has unsupported characters,
                or would produce a schema name longer than PostgreSQL allows
        """
        if not tenant_id or not tenant_id.strip():
            raise ValidationError(
                "Tenant id cannot be empty",
                field_errors=[{"field": "tenant_id", "message": "required"}],
            )
        if not cls.TENANT_ID_PATTERN.match(tenant_id.strip()):
            raise ValidationError(
                f"Tenant id '{tenant_id}' contains unsupported characters",
                field_errors=[{
                    "field": "tenant_id",
                    "message": "only letters, digits, hyphens and underscores are allowed",
                }],
            )
        max_length = MAX_IDENTIFIER_LENGTH - len(prefix)
        if len(tenant_id.strip()) > max_length:
            raise ValidationError(
                f"Tenant id '{tenant_id}' is too long",
                field_errors=[{"field": "tenant_id", "message": f"at most {max_length} characters"}],
            )

    @classmethod
    def validate_name(cls, name: str) -> None:
        """Validate tenant display name.

        Raises:
            ValidationError: If name is invalid
        """
        if not name or not name.strip():
            raise ValidationError(
                "Name cannot be empty",
                field_errors=[{"field": "name", "message": "required"}],
            )
        length = len(name.strip())
        if length < cls.MIN_NAME_LENGTH or length > cls.MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name length must be between {cls.MIN_NAME_LENGTH}-{cls.MAX_NAME_LENGTH} characters",
                field_errors=[{"field": "name", "message": "invalid length"}],
            )

    @classmethod
    def generate_schema_name(cls, tenant_id: str, prefix: str = DatabaseSchemas.TENANT_PREFIX) -> str:
        """Derive the schema name for a tenant.

        >>> TenantValidationRules.generate_schema_name("Acme-01")
        'tenant_acme_01'
        """
        cls.validate_tenant_id(tenant_id, prefix)
        schema_name = f"{prefix}{cls.normalize_tenant_id(tenant_id)}"
        return validate_schema_identifier(schema_name, prefix)

    @classmethod
    def collect_errors(cls, tenant_id: str, name: str) -> List[Dict[str, Any]]:
        """All field errors for a create request, instead of the first one."""
        errors: List[Dict[str, Any]] = []
        for check, value in ((cls.validate_tenant_id, tenant_id), (cls.validate_name, name)):
            try:
                check(value)
            except ValidationError as e:
                errors.extend(e.field_errors)
        return errors


def derive_schema_name(tenant_id: str, prefix: str = DatabaseSchemas.TENANT_PREFIX) -> str:
    """Schema name for ``tenant_id``; see ``TenantValidationRules.generate_schema_name``."""
    return TenantValidationRules.generate_schema_name(tenant_id, prefix)
