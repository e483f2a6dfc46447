"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import validate_link, validate_required_text


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str = Field(max_length=500)
    link: str
    description: str | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        """Title is required and can't be blank."""
        return validate_required_text(v, "title")

    @field_validator("link")
    @classmethod
    def check_link(cls, v: str) -> str:
        """Only absolute http(s) links are accepted."""
        return validate_link(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for updating an existing bookmark.

    Only fields present in the request body are applied.
    """

    title: str | None = Field(default=None, max_length=500)
    link: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        """Title can't be blanked out, only replaced."""
        if v is None:
            return None
        return validate_required_text(v, "title")

    @field_validator("link")
    @classmethod
    def check_link(cls, v: str | None) -> str | None:
        """Validate link if provided."""
        if v is None:
            return None
        return validate_link(v)


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: str | None
    link: str
    created_at: datetime
    updated_at: datetime
