"""Publication request models."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from ....models.base import BaseSchema, UpdateSchema

PublicationStatus = Literal["novo", "lido", "arquivado"]
PublicationSource = Literal["CNJ-DATAJUD", "Codilo", "JusBrasil"]


class CreatePublicationRequest(BaseSchema):
    oab_number: str = Field(..., min_length=1, max_length=30)
    publication_date: date
    content: str = Field(..., min_length=1)
    source: PublicationSource
    process_number: Optional[str] = Field(None, max_length=50)
    external_id: Optional[str] = None
    status: PublicationStatus = "novo"
    tags: List[str] = Field(default_factory=list)


class UpdatePublicationRequest(UpdateSchema):
    status: Optional[PublicationStatus] = None
    process_number: Optional[str] = Field(None, max_length=50)
    tags: Optional[List[str]] = None
