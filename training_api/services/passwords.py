"""Password hashing and reset-password generation."""

from __future__ import annotations

import secrets
import string

import bcrypt

BCRYPT_ROUNDS = 10

_BASE36 = string.digits + string.ascii_lowercase
_FRAGMENT_LENGTH = 10


def hash_password(password: str) -> str:
    digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return digest.decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of ``password`` against a stored bcrypt hash."""

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # Malformed hash in storage; treat as a mismatch.
        return False


def _base36_fragment(length: int = _FRAGMENT_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_reset_password() -> str:
    """Two independent random base-36 fragments joined together."""

    return _base36_fragment() + _base36_fragment()


__all__ = ["generate_reset_password", "hash_password", "verify_password"]
