"""Pydantic schemas for signup and signin."""
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from schemas.validators import normalize_email


class AuthRequest(BaseModel):
    """Credentials submitted to /auth/signup and /auth/signin."""

    email: EmailStr
    password: str = Field(
        min_length=1,
        max_length=1024,
        validation_alias=AliasChoices("password", "secret"),
    )

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        """Store and look up emails in one canonical form."""
        return normalize_email(v)


class SignupRequest(AuthRequest):
    """Signup credentials plus optional profile fields."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class AccessTokenResponse(BaseModel):
    """Bearer token returned after a successful signup or signin."""

    access_token: str
    token_type: str = "bearer"
