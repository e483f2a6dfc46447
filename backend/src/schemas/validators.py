"""
Shared validation functions for Pydantic schemas.

Used by the auth, user and bookmark schemas. Service code reuses
normalize_email so lookups and inserts agree on one canonical form.
"""
from urllib.parse import urlparse

ALLOWED_LINK_SCHEMES = {"http", "https"}


def normalize_email(email: str) -> str:
    """Canonical form of an email address: trimmed and lower-cased."""
    return email.strip().lower()


def validate_link(link: str) -> str:
    """
    Validate a bookmark link.

    Args:
        link: The URL submitted by the client.

    Returns:
        The link with surrounding whitespace removed.

    Raises:
        ValueError: If the link isn't an absolute http(s) URL.
    """
    stripped = link.strip()
    parsed = urlparse(stripped)
    if parsed.scheme.lower() not in ALLOWED_LINK_SCHEMES or not parsed.netloc:
        raise ValueError("Link must be an absolute http or https URL")
    return stripped


def validate_required_text(value: str, field: str) -> str:
    """Reject values that are empty once whitespace is removed."""
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field} should not be empty")
    return stripped
