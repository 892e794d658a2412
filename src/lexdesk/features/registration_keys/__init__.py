"""Registration keys: hashed one-time (or n-time) signup secrets."""

from .entities.registration_key import RegistrationKey
from .models.requests import CreateKeyRequest
from .repositories.registration_key_repository import RegistrationKeyRepository
from .services.registration_key_service import CreateUserCallback, RegistrationKeyService
from .utils.hashing import generate_plain_key, hash_key, key_matches

__all__ = [
    "RegistrationKey",
    "CreateKeyRequest",
    "RegistrationKeyRepository",
    "RegistrationKeyService",
    "CreateUserCallback",
    "generate_plain_key",
    "hash_key",
    "key_matches",
]
