"""
Password hashing and verification using Argon2id.

The encoded hash embeds its own random salt and cost parameters, so the stored
value is the only thing needed to verify a password later.
"""
import secrets
from functools import cached_property

import argon2
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from services.exceptions import EncodingError


def _encode(secret: str) -> bytes:
    try:
        return secret.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError() from e


class PasswordHasher:
    """Salted, tunable-cost one-way hashing of user secrets."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=argon2.Type.ID,
        )

    def hash(self, secret: str) -> str:
        """
        Hash a secret with a fresh random salt.

        Raises:
            EncodingError: If the secret can't be encoded as UTF-8.
        """
        return self._hasher.hash(_encode(secret))

    def verify(self, secret: str, stored: str) -> bool:
        """Check a secret against a stored hash. Returns False rather than raising."""
        try:
            return self._hasher.verify(stored, _encode(secret))
        except (VerifyMismatchError, VerificationError, InvalidHashError, EncodingError):
            return False

    def needs_rehash(self, stored: str) -> bool:
        """True if the stored hash was made with different cost parameters."""
        try:
            return self._hasher.check_needs_rehash(stored)
        except InvalidHashError:
            return False

    @cached_property
    def dummy_hash(self) -> str:
        """
        Hash of a random value nobody knows.

        Verifying against it costs the same as a real verification, which keeps
        signin for an unknown email as slow as signin with a wrong password.
        """
        return self.hash(secrets.token_urlsafe(32))
