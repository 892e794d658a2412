"""Registration key secrets.

The plain key is shown to the admin once; only its SHA-256 digest is
stored. A high-entropy random secret needs no salt or slow KDF, and a
deterministic digest lets consumption look the key up by hash.
"""

import hmac
import secrets

from cryptography.hazmat.primitives import hashes

KEY_BYTES = 32


def generate_plain_key() -> str:
    """64 hex characters of randomness."""
    return secrets.token_hex(KEY_BYTES)


def hash_key(plain_key: str) -> str:
    """
    Hex SHA-256 digest of a plain key.

    Args:
        plain_key: The secret as given to the user.

    Returns:
        64-character lowercase hex digest.
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(plain_key.strip().encode("utf-8"))
    return digest.finalize().hex()


def key_matches(plain_key: str, key_hash: str) -> bool:
    """Constant-time comparison of a plain key against a stored digest."""
    return hmac.compare_digest(hash_key(plain_key), key_hash)
