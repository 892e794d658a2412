"""Client request models."""

from typing import List, Literal, Optional

from pydantic import Field

from ....models.base import BaseSchema, UpdateSchema

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

ClientStatus = Literal["active", "inactive"]
ClientType = Literal["individual", "company"]


class CreateClientRequest(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=50)
    document: Optional[str] = Field(None, max_length=50, description="CPF or CNPJ")
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    status: ClientStatus = "active"
    type: ClientType = "individual"
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class UpdateClientRequest(UpdateSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=50)
    document: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    status: Optional[ClientStatus] = None
    type: Optional[ClientType] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
