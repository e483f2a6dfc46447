"""
Bearer-token authentication for protected routes.

BearerAuthenticator is the gate itself, split into the three steps every
request goes through: extract the token from the Authorization header,
validate its signature and expiry, resolve its subject to a live user.
get_current_user wires it into FastAPI as a dependency that protected routers
declare for every route.
"""
import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.passwords import PasswordHasher
from core.tokens import TokenService
from db.session import get_async_session
from schemas.user import UserPublic
from services.exceptions import AuthTokenError, UnauthenticatedError
from services.user_directory import SqlUserDirectory, UserDirectory

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


class BearerAuthenticator:
    """Resolve an Authorization header to the user it authenticates."""

    def __init__(self, tokens: TokenService, scheme: str = BEARER_SCHEME) -> None:
        self.tokens = tokens
        self.scheme = scheme

    def extract(self, authorization: str | None) -> str:
        """
        Pull the token out of an `Authorization: Bearer <token>` header.

        Raises:
            UnauthenticatedError: Header missing, wrong scheme, or empty token.
        """
        if not authorization:
            raise UnauthenticatedError()
        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != self.scheme.lower() or not token:
            raise UnauthenticatedError()
        return token

    def validate(self, token: str) -> int:
        """
        Check signature and expiry and return the token's subject.

        Invalid and expired tokens are reported the same way to the caller.

        Raises:
            UnauthenticatedError: Token didn't validate.
        """
        try:
            return self.tokens.validate(token)
        except AuthTokenError as e:
            logger.debug("Bearer token rejected: %s", e)
            raise UnauthenticatedError() from e

    async def resolve(self, directory: UserDirectory, subject: int) -> UserPublic:
        """
        Load the token's user and project it without the password hash.

        Raises:
            UnauthenticatedError: The user no longer exists.
        """
        user = await directory.find_by_id(subject)
        if user is None:
            logger.info("Valid token for missing user %s", subject)
            raise UnauthenticatedError()
        return UserPublic.model_validate(user)

    async def authenticate(
        self,
        authorization: str | None,
        directory: UserDirectory,
    ) -> UserPublic:
        """Run extract, validate and resolve in order."""
        token = self.extract(authorization)
        subject = self.validate(token)
        return await self.resolve(directory, subject)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    """Token service configured from settings."""
    return TokenService(settings.token_config)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    """Password hasher with the configured Argon2 work factor."""
    return _cached_hasher(
        settings.password_time_cost,
        settings.password_memory_cost,
        settings.password_parallelism,
    )


@lru_cache
def _cached_hasher(time_cost: int, memory_cost: int, parallelism: int) -> PasswordHasher:
    # Cached so dummy_hash is computed once per process
    return PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
    )


def get_authenticator(
    tokens: TokenService = Depends(get_token_service),
) -> BearerAuthenticator:
    """Bearer gate using the configured token service."""
    return BearerAuthenticator(tokens)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    authenticator: BearerAuthenticator = Depends(get_authenticator),
) -> UserPublic:
    """
    Dependency that authenticates the request and returns the current user.

    The resolved user is also stored on `request.state.user` for middleware
    and handlers that don't take it as a parameter.
    """
    try:
        user = await authenticator.authenticate(
            request.headers.get("Authorization"),
            SqlUserDirectory(db),
        )
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": BEARER_SCHEME},
        ) from e
    request.state.user = user
    return user
