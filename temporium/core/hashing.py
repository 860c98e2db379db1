"""SHA-256 digests for passwords and export payloads."""

from __future__ import annotations

import hashlib
import hmac

DIGEST_HEX_LENGTH = 64


def digest(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of data."""
    return hashlib.sha256(data).hexdigest()


EMPTY_DIGEST = digest(b"")


def hash_password(password: str, salt: str) -> str:
    """Hash a password as digest(salt + password + salt).

    The salt is the owner's username, so the stored hash is only valid for
    the username it was computed with.
    """
    return digest((salt + password + salt).encode("utf-8"))


def verify_password(password: str, stored_hash: str, salt: str) -> bool:
    """Check a password against a stored hash."""
    computed = hash_password(password, salt)
    return hmac.compare_digest(computed.encode(), stored_hash.lower().encode())

