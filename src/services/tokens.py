"""Issuing and verifying signed bearer tokens."""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ConfigDict, ValidationError

from src.errors import SigningError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenClaims(BaseModel):
    """Decoded token payload."""

    model_config = ConfigDict(frozen=True)

    sub: int
    exp: datetime
    iat: datetime | None = None
    jti: str | None = None


class TokenIssuer:
    """Signs tokens carrying a user id and an absolute expiry.

    Issuing is stateless: every call yields an independent token and several
    valid tokens may exist for the same user at once.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        default_duration: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.default_duration = default_duration
        self._clock = clock

    def issue(self, subject_id: int, duration: timedelta | None = None) -> str:
        """Create a signed token for ``subject_id`` valid for ``duration``."""
        issued_at = self._clock()
        if duration is None:
            duration = self.default_duration
        expires_at = issued_at + duration
        claims = {
            # JWT requires "sub" to be a string
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": expires_at,
            "jti": uuid.uuid4().hex,
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=self.algorithm)
        except JOSEError as e:
            raise SigningError(f"Failed to sign token: {e}") from e


class TokenVerifier:
    """Checks signature and expiry of tokens produced by ``TokenIssuer``."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self._secret = secret
        self.algorithm = algorithm

    def decode(self, token: str) -> TokenClaims | None:
        """Decode and validate a token, or return None if it cannot be trusted."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
            return TokenClaims.model_validate(payload)
        except (JWTError, ValidationError) as e:
            logger.debug(f"Rejected token: {type(e).__name__}")
            return None

    def verify(self, token: str) -> int | None:
        """Return the subject id of a valid token, otherwise None."""
        claims = self.decode(token)
        if claims is None:
            return None
        return claims.sub
