"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. One token
type, one lifetime (24h), no refresh. Payload:

    {"user_id": 42, "iat": 1700000000, "exp": 1700086400}

Verification pins the algorithm. The header's "alg" must equal the
configured HMAC algorithm exactly, checked before the signature is even
looked at. A token claiming "none" or a different scheme never reaches
the secret. Every failure raises the same InvalidTokenError so callers
(and attackers) can't tell expired from forged from garbled.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
import structlog

logger = structlog.get_logger()

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class InvalidTokenError(Exception):
    """Raised when a token fails verification, whatever the reason."""

    def __init__(self, message: str = INVALID_TOKEN_MESSAGE):
        super().__init__(message)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Issues and verifies HMAC-signed bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_hours: int = 24,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("TokenCodec requires a non-empty secret")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(hours=expires_hours)
        self._clock = clock or _utcnow

    def issue(self, user_id: int) -> str:
        """Create a signed token for user_id, valid for the configured lifetime."""
        now = self._clock()
        payload = {
            "user_id": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Verify a token and return the user_id it was issued for.

        Raises InvalidTokenError on any failure.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != self.algorithm:
                raise jwt.InvalidAlgorithmError(
                    f"unexpected signing algorithm: {header.get('alg')!r}"
                )
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "user_id"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("auth.token_rejected", reason=type(e).__name__)
            raise InvalidTokenError() from None

        user_id = payload["user_id"]
        # bool is an int subclass; reject it along with strings/floats
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id < 1:
            logger.debug("auth.token_rejected", reason="bad_user_id_claim")
            raise InvalidTokenError()
        return user_id
