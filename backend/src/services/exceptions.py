"""Shared exceptions for service layer operations."""


class DuplicateEmailError(Exception):
    """Raised when an email is already registered to another user."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


class InvalidCredentialsError(Exception):
    """
    Raised when signin fails.

    Unknown email and wrong password raise the same error with the same message
    so callers cannot tell which one happened.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class UnauthenticatedError(Exception):
    """
    Raised when a request carries no usable bearer token.

    Covers a missing or malformed Authorization header, an invalid or expired
    token, and a token whose user no longer exists.
    """

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class ForbiddenError(Exception):
    """
    Raised when the requester may not access a resource.

    Also raised when the resource does not exist, so ownership-gated routes
    never reveal which ids exist.
    """

    def __init__(self) -> None:
        super().__init__("Access to resource is forbidden")


class NotFoundError(Exception):
    """Raised by directory operations when a record id doesn't exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class EncodingError(Exception):
    """Raised when a secret cannot be encoded to bytes for hashing."""

    def __init__(self) -> None:
        super().__init__("Secret is not valid UTF-8 text")


class AuthTokenError(Exception):
    """Base class for bearer token validation failures."""


class InvalidSignatureError(AuthTokenError):
    """Raised when a token is malformed or its signature doesn't verify."""

    def __init__(self) -> None:
        super().__init__("Invalid token signature")


class TokenExpiredError(AuthTokenError):
    """Raised when a correctly signed token is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Token has expired")
