"""Stateless bearer tokens signed with a server-side secret (HS256 JWT)."""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from services.exceptions import InvalidSignatureError, TokenExpiredError

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenConfig:
    """Signing secret, default lifetime and algorithm for issued tokens."""

    secret: str
    ttl: timedelta
    algorithm: str = "HS256"


class TokenService:
    """
    Issue and validate signed, time-bound tokens carrying a user id.

    Nothing is persisted: a token is valid iff its signature verifies against
    the configured secret and its `exp` claim is still in the future.
    """

    def __init__(
        self,
        config: TokenConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config = config
        self._clock = clock

    def issue(self, subject: int, ttl: timedelta | None = None) -> str:
        """Return a signed token for `subject` that expires after `ttl`."""
        issued_at = self._clock()
        expires_at = issued_at + (ttl if ttl is not None else self._config.ttl)
        payload = {
            # JWT requires `sub` to be a string
            "sub": str(subject),
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def validate(self, token: str) -> int:
        """
        Verify the token and return the user id it was issued for.

        PyJWT verifies the signature before any claim is read, and only the
        configured algorithm is accepted.

        Raises:
            TokenExpiredError: The signature is valid but `exp` has passed.
            InvalidSignatureError: The token is malformed, tampered with, signed
                with another key or algorithm, or carries an unusable subject.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidSignatureError() from e

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidSignatureError() from e
