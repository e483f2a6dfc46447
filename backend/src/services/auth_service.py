"""Signup and signin flows: hash, create, verify, issue token."""
import asyncio
import logging

from core.passwords import PasswordHasher
from core.tokens import TokenService
from schemas.validators import normalize_email
from services.exceptions import InvalidCredentialsError
from services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class AuthService:
    """
    Coordinates the credential hasher, user directory and token service.

    Argon2 is CPU bound, so hashing and verification run in a worker thread
    to keep the event loop free for other requests.
    """

    def __init__(
        self,
        directory: UserDirectory,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.directory = directory
        self.hasher = hasher
        self.tokens = tokens

    async def signup(
        self,
        email: str,
        secret: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> str:
        """
        Register a new user and return a bearer token for them.

        Raises:
            DuplicateEmailError: The email is already registered. Propagated
                as-is; a uniqueness violation is never retried.
            EncodingError: The secret can't be encoded for hashing.
        """
        hashed = await asyncio.to_thread(self.hasher.hash, secret)
        user = await self.directory.create(
            normalize_email(email),
            hashed,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info("Registered user %s", user.id)
        return self.tokens.issue(user.id)

    async def signin(self, email: str, secret: str) -> str:
        """
        Verify credentials and return a bearer token.

        Unknown email and wrong secret fail identically: an unknown email is
        still verified against a dummy hash so both paths cost one Argon2
        verification.

        Raises:
            InvalidCredentialsError: Unknown email or wrong secret.
        """
        user = await self.directory.find_by_email(normalize_email(email))
        stored = user.hash if user is not None else self.hasher.dummy_hash
        matches = await asyncio.to_thread(self.hasher.verify, secret, stored)

        if user is None or not matches:
            logger.warning("Signin failed")
            raise InvalidCredentialsError()

        if self.hasher.needs_rehash(stored):
            rehashed = await asyncio.to_thread(self.hasher.hash, secret)
            await self.directory.set_hash(user.id, rehashed)
            logger.info("Upgraded password hash for user %s", user.id)

        logger.info("User %s signed in", user.id)
        return self.tokens.issue(user.id)
