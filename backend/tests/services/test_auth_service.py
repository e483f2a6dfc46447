"""Tests for the signup and signin flows."""
from unittest.mock import AsyncMock

import pytest

from core.passwords import PasswordHasher
from core.tokens import TokenService
from services.auth_service import AuthService
from services.exceptions import (
    DuplicateEmailError,
    EncodingError,
    InvalidCredentialsError,
)
from services.user_directory import UserDirectory

PASSWORD = "correct horse battery staple"


@pytest.fixture
def service(
    memory_directory: UserDirectory,
    hasher: PasswordHasher,
    token_service: TokenService,
) -> AuthService:
    return AuthService(memory_directory, hasher, token_service)


class TestSignup:
    """Tests for AuthService.signup."""

    async def test__signup__returns_token_for_new_user(
        self,
        service: AuthService,
        memory_directory: UserDirectory,
        token_service: TokenService,
    ) -> None:
        token = await service.signup("alice@example.com", PASSWORD)

        user = await memory_directory.find_by_email("alice@example.com")
        assert user is not None
        assert token_service.validate(token) == user.id

    async def test__signup__stores_hash_not_plaintext(
        self,
        service: AuthService,
        memory_directory: UserDirectory,
        hasher: PasswordHasher,
    ) -> None:
        await service.signup("alice@example.com", PASSWORD)

        user = await memory_directory.find_by_email("alice@example.com")
        assert user is not None
        assert user.hash != PASSWORD
        assert PASSWORD not in user.hash
        assert hasher.verify(PASSWORD, user.hash) is True

    async def test__signup__normalizes_email_and_keeps_names(
        self, service: AuthService, memory_directory: UserDirectory,
    ) -> None:
        await service.signup(" Alice@Example.com ", PASSWORD, "Alice", "Liddell")

        user = await memory_directory.find_by_email("alice@example.com")
        assert user is not None
        assert user.email == "alice@example.com"
        assert user.first_name == "Alice"
        assert user.last_name == "Liddell"

    async def test__signup__duplicate_email_raises(self, service: AuthService) -> None:
        await service.signup("alice@example.com", PASSWORD)
        with pytest.raises(DuplicateEmailError):
            await service.signup("ALICE@example.com", "another password")

    async def test__signup__unencodable_secret_raises(self, service: AuthService) -> None:
        with pytest.raises(EncodingError):
            await service.signup("alice@example.com", "bad\ud800")

    async def test__signup__lost_race_propagates_without_retry(
        self, hasher: PasswordHasher, token_service: TokenService,
    ) -> None:
        """A uniqueness violation from storage surfaces as-is and create runs once."""
        directory = AsyncMock()
        directory.create.side_effect = DuplicateEmailError("race@example.com")
        service = AuthService(directory, hasher, token_service)

        with pytest.raises(DuplicateEmailError):
            await service.signup("race@example.com", PASSWORD)

        directory.create.assert_awaited_once()
        directory.find_by_email.assert_not_awaited()


class TestSignin:
    """Tests for AuthService.signin."""

    async def test__signin__correct_credentials_returns_token(
        self,
        service: AuthService,
        memory_directory: UserDirectory,
        token_service: TokenService,
    ) -> None:
        await service.signup("bob@example.com", PASSWORD)
        user = await memory_directory.find_by_email("bob@example.com")
        assert user is not None

        token = await service.signin("bob@example.com", PASSWORD)

        assert token_service.validate(token) == user.id

    async def test__signin__email_is_case_insensitive(self, service: AuthService) -> None:
        await service.signup("bob@example.com", PASSWORD)
        assert await service.signin("  BOB@Example.com", PASSWORD)

    async def test__signin__wrong_password_raises(self, service: AuthService) -> None:
        await service.signup("bob@example.com", PASSWORD)
        with pytest.raises(InvalidCredentialsError):
            await service.signin("bob@example.com", "wrong password")

    async def test__signin__unknown_email_raises(self, service: AuthService) -> None:
        with pytest.raises(InvalidCredentialsError):
            await service.signin("nobody@example.com", PASSWORD)

    async def test__signin__unknown_email_and_wrong_password_fail_identically(
        self, service: AuthService,
    ) -> None:
        await service.signup("bob@example.com", PASSWORD)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.signin("bob@example.com", "wrong password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await service.signin("nobody@example.com", PASSWORD)

        assert str(wrong_password.value) == str(unknown_email.value)
        assert type(wrong_password.value) is type(unknown_email.value)

    async def test__signin__unknown_email_still_verifies_against_dummy_hash(
        self,
        memory_directory: UserDirectory,
        hasher: PasswordHasher,
        token_service: TokenService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        calls: list[str] = []
        original_verify = hasher.verify

        def recording_verify(secret: str, stored: str) -> bool:
            calls.append(stored)
            return original_verify(secret, stored)

        monkeypatch.setattr(hasher, "verify", recording_verify)
        service = AuthService(memory_directory, hasher, token_service)

        with pytest.raises(InvalidCredentialsError):
            await service.signin("nobody@example.com", PASSWORD)

        assert calls == [hasher.dummy_hash]

    async def test__signin__unencodable_secret_is_invalid_credentials(
        self, service: AuthService,
    ) -> None:
        await service.signup("bob@example.com", PASSWORD)
        with pytest.raises(InvalidCredentialsError):
            await service.signin("bob@example.com", "bad\ud800")

    async def test__signin__outdated_hash_is_upgraded(
        self,
        memory_directory: UserDirectory,
        token_service: TokenService,
    ) -> None:
        weak = PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)
        strong = PasswordHasher(time_cost=2, memory_cost=1024, parallelism=1)
        user = await memory_directory.create("erin@example.com", weak.hash(PASSWORD))
        old_hash = user.hash

        await AuthService(memory_directory, strong, token_service).signin(
            "erin@example.com", PASSWORD,
        )

        refreshed = await memory_directory.find_by_id(user.id)
        assert refreshed is not None
        assert refreshed.hash != old_hash
        assert strong.needs_rehash(refreshed.hash) is False
        assert strong.verify(PASSWORD, refreshed.hash) is True

    async def test__signin__current_hash_is_left_alone(
        self, service: AuthService, memory_directory: UserDirectory,
    ) -> None:
        await service.signup("erin@example.com", PASSWORD)
        user = await memory_directory.find_by_email("erin@example.com")
        assert user is not None
        before = user.hash

        await service.signin("erin@example.com", PASSWORD)

        assert user.hash == before
