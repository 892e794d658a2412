"""Registration key lifecycle: generate, list, revoke, inspect and consume."""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ....core.exceptions import EntityNotFoundError, RegistrationKeyError, ValidationError
from ....database.error_handling import STORE_FAILURES, to_store_error
from ....database.protocols import Store
from ....repositories.base import generate_record_id
from ..entities.registration_key import RegistrationKey
from ..models.requests import CreateKeyRequest
from ..repositories.registration_key_repository import RegistrationKeyRepository
from ..utils.hashing import generate_plain_key, hash_key

logger = logging.getLogger(__name__)

# Receives the transaction's connection and the validated key, creates the
# user on that connection and returns it (at least ``id`` and ``email``).
CreateUserCallback = Callable[[Any, RegistrationKey], Awaitable[Dict[str, Any]]]


class RegistrationKeyService:
    """Admin operations on registration keys plus atomic consumption."""

    def __init__(self, store: Store, repository: RegistrationKeyRepository):
        self._store = store
        self._repository = repository

    async def generate_key(self, request: Any, created_by: Optional[str] = None) -> str:
        """Store a new key and return the plain secret. It is not retrievable later."""
        if not isinstance(request, CreateKeyRequest):
            try:
                request = CreateKeyRequest.model_validate(request)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic(e, "Invalid registration key request") from e

        plain_key = generate_plain_key()
        key = await self._repository.create(
            generate_record_id("key"), hash_key(plain_key), request, created_by
        )
        logger.info(
            f"Generated registration key {key.id} ({key.account_type.value}, "
            f"uses={key.uses_allowed}, tenant={key.tenant_id or 'new'})"
        )
        return plain_key

    async def list_keys(self, tenant_id: Optional[str] = None) -> List[RegistrationKey]:
        return await self._repository.list(tenant_id)

    async def revoke_key(self, key_id: str) -> None:
        if not await self._repository.revoke(key_id):
            raise EntityNotFoundError("RegistrationKey", key_id)
        logger.info(f"Revoked registration key {key_id}")

    async def get_key_usage(self, key_id: str) -> Dict[str, Any]:
        key = await self._repository.get(key_id)
        return key.usage()

    async def consume_key(self, plain_key: str, create_user: CreateUserCallback) -> Dict[str, Any]:
        """Validate a key, create the user and record the use in one transaction.

        The key row is locked for the duration, so concurrent registrations
        cannot consume more than ``uses_allowed`` times. If ``create_user``
        raises, nothing is recorded.

        Raises:
            RegistrationKeyError: unknown, revoked, exhausted or expired key
        """
        if not plain_key or not plain_key.strip():
            raise RegistrationKeyError("invalid")

        key_hash = hash_key(plain_key)
        try:
            async with self._store.transaction() as connection:
                key = await self._repository.lock_by_hash(connection, key_hash)
                if key is None:
                    raise RegistrationKeyError("invalid")
                reason = key.rejection_reason()
                if reason:
                    raise RegistrationKeyError(reason)

                user = await create_user(connection, key)
                updated = await self._repository.record_use(connection, key.id, user)
                if updated is None:
                    raise RegistrationKeyError("exhausted")
        except STORE_FAILURES as e:
            logger.error(f"Registration key consumption failed: {e!r}")
            raise to_store_error(e, "consume registration key") from e

        logger.info(f"Registration key {key.id} used by {user.get('email')}, {updated.uses_left} uses left")
        return user
