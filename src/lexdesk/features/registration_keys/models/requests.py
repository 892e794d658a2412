"""Registration key request models."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from ....config.constants import AccountType
from ....models.base import BaseSchema


class CreateKeyRequest(BaseSchema):
    tenant_id: Optional[str] = None
    account_type: AccountType
    uses_allowed: int = Field(1, ge=1, le=10000)
    single_use: bool = True
    expires_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def single_use_means_one(self) -> "CreateKeyRequest":
        if self.single_use and self.uses_allowed != 1:
            raise ValueError("single_use keys allow exactly one use")
        return self
