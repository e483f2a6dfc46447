"""FastAPI dependencies for injection."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import (
    get_authenticator,
    get_current_user,
    get_password_hasher,
    get_token_service,
)
from core.config import get_settings
from core.passwords import PasswordHasher
from core.tokens import TokenService
from db.session import get_async_session
from services.auth_service import AuthService
from services.user_directory import SqlUserDirectory


def get_user_directory(
    db: AsyncSession = Depends(get_async_session),
) -> SqlUserDirectory:
    """User directory bound to the request's session."""
    return SqlUserDirectory(db)


def get_auth_service(
    directory: SqlUserDirectory = Depends(get_user_directory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    """Auth orchestrator for signup/signin routes."""
    return AuthService(directory, hasher, tokens)


__all__ = [
    "get_async_session",
    "get_auth_service",
    "get_authenticator",
    "get_current_user",
    "get_password_hasher",
    "get_settings",
    "get_token_service",
    "get_user_directory",
]
