"""Publications module."""

from .entities.publication import Publication
from .models.requests import CreatePublicationRequest, UpdatePublicationRequest
from .repositories.publication_repository import PublicationRepository

__all__ = [
    "Publication",
    "CreatePublicationRequest",
    "UpdatePublicationRequest",
    "PublicationRepository",
]
