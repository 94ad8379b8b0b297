"""Credential Engine — salt generation, Argon2id hashing and verification.

Invariants:
    - Salts are 32 bytes from the OS CSPRNG
    - Hashes are Argon2id PHC strings with the fixed cost parameters below;
      changing them does not invalidate stored hashes (params are encoded in the string)
    - The per-user salt is both the Argon2 salt and bound into the secret,
      so verifying against the wrong salt fails
    - Verification never compares strings directly: argon2's verify routine
      does the constant-time comparison
    - Hash and salt never leave this module and the user service

Design Decisions:
    - argon2-cffi low_level API: the caller owns the salt (stored in its own column)
"""

import secrets

from argon2.exceptions import VerificationError, VerifyMismatchError
from argon2.low_level import Type, hash_secret, verify_secret

from unrecorded.core.errors import InvalidArgumentError

SALT_LENGTH = 32

# Argon2id cost parameters
TIME_COST = 3
MEMORY_COST = 65536  # KiB (64 MiB)
PARALLELISM = 4
HASH_LENGTH = 32


def generate_salt() -> bytes:
    """Return SALT_LENGTH bytes of cryptographically secure random data."""
    return secrets.token_bytes(SALT_LENGTH)


def _salted_secret(plaintext: str, salt: bytes) -> bytes:
    return plaintext.encode("utf-8") + salt


def hash_password(plaintext: str, salt: bytes) -> str:
    """Hash plaintext with Argon2id under the given salt."""
    if not plaintext:
        raise InvalidArgumentError("Password cannot be null or empty.", "password")
    if not salt:
        raise InvalidArgumentError("Salt cannot be null or empty.", "salt")
    encoded = hash_secret(
        _salted_secret(plaintext, salt),
        salt,
        time_cost=TIME_COST,
        memory_cost=MEMORY_COST,
        parallelism=PARALLELISM,
        hash_len=HASH_LENGTH,
        type=Type.ID,
    )
    return encoded.decode("ascii")


def verify_password(password_hash: str, plaintext: str, salt: bytes) -> bool:
    """Return True iff plaintext + salt reproduce password_hash."""
    if password_hash is None or plaintext is None or salt is None:
        raise InvalidArgumentError(
            "Hashed password, raw password, and salt cannot be null.",
        )
    try:
        return verify_secret(
            password_hash.encode("utf-8"),
            _salted_secret(plaintext, salt),
            Type.ID,
        )
    except VerifyMismatchError:
        return False
    except VerificationError:
        raise InvalidArgumentError("Stored password hash is malformed.") from None
