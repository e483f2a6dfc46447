"""Pydantic schemas for user endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from schemas.validators import normalize_email


class UserPublic(BaseModel):
    """
    Public view of a user.

    Built from a models.user.User by explicit projection; the password hash is
    not a field here, so it can't be serialized by accident.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    email: str
    first_name: str | None
    last_name: str | None
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    """Schema for editing the current user's profile. All fields optional."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        """Normalize email if provided."""
        if v is None:
            return None
        return normalize_email(v)
