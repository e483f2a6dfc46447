"""Pytest fixtures for testing."""
import os

# Must be set before any app import triggers Settings validation.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-at-least-32-chars"
# Cheapest Argon2 parameters so hashing doesn't dominate test time
os.environ["PASSWORD_TIME_COST"] = "1"
os.environ["PASSWORD_MEMORY_COST"] = "1024"
os.environ["PASSWORD_PARALLELISM"] = "1"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import Settings, get_settings  # noqa: E402
from core.passwords import PasswordHasher  # noqa: E402
from core.tokens import TokenService  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402
from services.exceptions import DuplicateEmailError, NotFoundError  # noqa: E402

TEST_PASSWORD = "correct horse battery staple"


class InMemoryUserDirectory:
    """UserDirectory kept in a dict, for testing the auth core without a database."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self._next_id = 1

    async def find_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        return next((u for u in self.users.values() if u.email == normalized), None)

    async def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    async def create(
        self,
        email: str,
        hash: str,  # noqa: A002
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        normalized = email.strip().lower()
        if await self.find_by_email(normalized) is not None:
            raise DuplicateEmailError(normalized)
        now = datetime.now(UTC)
        user = User(
            id=self._next_id,
            email=normalized,
            hash=hash,
            first_name=first_name,
            last_name=last_name,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    async def update(self, user_id: int, fields: dict[str, Any]) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        for field, value in fields.items():
            setattr(user, field, value)
        return user

    async def set_hash(self, user_id: int, hash: str) -> None:  # noqa: A002
        self.users[user_id].hash = hash


@pytest.fixture
def settings() -> Settings:
    """Settings as loaded from the test environment."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def hasher() -> PasswordHasher:
    """Password hasher with minimal work factor."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    """Token service signing with the test secret."""
    return TokenService(settings.token_config)


@pytest.fixture
def memory_directory() -> InMemoryUserDirectory:
    """Empty in-memory user directory."""
    return InMemoryUserDirectory()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create an in-memory SQLite engine with all tables.

    StaticPool keeps the single in-memory database alive across connections.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on a fresh database."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    db_session: AsyncSession,
    settings: Settings,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient]:
    """
    Create a test client with database session override.

    The override commits at the end of each request like the real session
    dependency does, so every request sees the previous ones' writes.
    """
    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def signup(client: AsyncClient) -> Callable[..., Awaitable[str]]:
    """Sign up through the API and return the access token."""

    async def _signup(email: str, password: str = TEST_PASSWORD) -> str:
        response = await client.post(
            "/auth/signup", json={"email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["access_token"]

    return _signup


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Build the Authorization header for a bearer token."""

    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers
