"""Password hashing helpers.

Stored passwords use the ``salt:hash`` format: a random 16 byte salt and a
64 byte scrypt digest, both hex encoded.
"""
from __future__ import annotations

import hashlib
import hmac
import secrets

SALT_BYTES = 16
KEY_LENGTH = 64
_SCRYPT_PARAMS = {"n": 16384, "r": 8, "p": 1}


def _derive(password: str, salt: str) -> str:
    digest = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        dklen=KEY_LENGTH,
        **_SCRYPT_PARAMS,
    )
    return digest.hex()


def hash_password(password: str) -> str:
    salt = secrets.token_hex(SALT_BYTES)
    return f"{salt}:{_derive(password, salt)}"


def verify_password(stored: str, password: str) -> bool:
    salt, separator, expected = stored.partition(":")
    if not separator or not salt or not expected:
        return False
    return hmac.compare_digest(_derive(password, salt), expected)


__all__ = ["hash_password", "verify_password"]
