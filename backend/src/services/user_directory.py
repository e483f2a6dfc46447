"""
User directory: lookup, creation and profile updates of user records.

The storage layer is the single source of truth for email uniqueness: create()
and update() never pre-check, they rely on the unique constraint on
users.email and translate its IntegrityError into DuplicateEmailError.
"""
import logging
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from schemas.validators import normalize_email
from services.exceptions import DuplicateEmailError, NotFoundError

logger = logging.getLogger(__name__)

# Fields a profile update may touch. `hash` goes through set_hash() only.
UPDATABLE_FIELDS = frozenset({"email", "first_name", "last_name"})


class UserDirectory(Protocol):
    """Persistence contract the auth core depends on."""

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: int) -> User | None: ...

    async def create(
        self,
        email: str,
        hash: str,  # noqa: A002
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User: ...

    async def update(self, user_id: int, fields: dict[str, Any]) -> User: ...

    async def set_hash(self, user_id: int, hash: str) -> None: ...  # noqa: A002


class SqlUserDirectory:
    """
    UserDirectory backed by an AsyncSession.

    Note: Uses flush(), not commit. Session generator handles commit at request end.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        """Get a user by email (normalized before lookup)."""
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email)),
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> User | None:
        """Get a user by primary key."""
        return await self.db.get(User, user_id)

    async def create(
        self,
        email: str,
        hash: str,  # noqa: A002
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """
        Insert a new user.

        Raises:
            DuplicateEmailError: If the email is already registered, including
                when a concurrent request inserted it first.
        """
        normalized = normalize_email(email)
        user = User(
            email=normalized,
            hash=hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("User insert rejected by email unique constraint")
            raise DuplicateEmailError(normalized) from e
        await self.db.refresh(user)
        return user

    async def update(self, user_id: int, fields: dict[str, Any]) -> User:
        """
        Apply a partial update to a user's profile.

        Keys outside UPDATABLE_FIELDS are ignored, as is a null email.

        Raises:
            NotFoundError: If no user has this id.
            DuplicateEmailError: If the new email belongs to another user.
        """
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        new_email = None
        for field, value in fields.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "email":
                if value is None:
                    continue
                value = new_email = normalize_email(value)
            setattr(user, field, value)

        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("Profile update of user %s rejected: email taken", user_id)
            raise DuplicateEmailError(new_email or "") from e
        await self.db.refresh(user)
        return user

    async def set_hash(self, user_id: int, hash: str) -> None:  # noqa: A002
        """Replace the stored password hash."""
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        user.hash = hash
        await self.db.flush()
