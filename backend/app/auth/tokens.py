"""
Session token signing and verification.

Tokens are HMAC-signed JWTs carrying {sub, email, iat, exp}. There is no
server-side revocation: a token is valid until it expires or the signing
secret is rotated. Re-authentication is the only way to get a new one.

HS384 is the default because its 48-byte signature base64url-encodes to
exactly 64 characters with no spare bits, so changing any character of the
signature changes the decoded bytes.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.config import Settings
from app.errors import InvalidToken

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Signs and verifies session tokens with a process-wide secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS384",
        ttl: timedelta = timedelta(days=7),
        leeway: timedelta = timedelta(0),
    ):
        if not secret:
            raise ValueError("Token signing secret must be set")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._leeway = leeway

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.jwt_expiration_days),
            leeway=timedelta(seconds=settings.jwt_leeway_seconds),
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str, email: str, issued_at: Optional[datetime] = None) -> str:
        """
        Sign a token for a user.

        Args:
            user_id: User ID (stored as the ``sub`` claim)
            email: User email
            issued_at: Issue time, defaults to now (UTC)

        Returns:
            Compact JWT string
        """
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature, structure and expiry of a token.

        Raises:
            InvalidToken: If the token is malformed, tampered with, expired,
                or its payload is not an object with string sub/email
        """
        if not token or not isinstance(token, str):
            raise InvalidToken("Missing token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                leeway=self._leeway,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Token rejected: {e}")
            raise InvalidToken("Invalid token")

        if not isinstance(payload, dict):
            raise InvalidToken("Invalid token payload")

        user_id = payload.get("sub")
        email = payload.get("email")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken("Invalid token payload: missing user id")
        if not isinstance(email, str) or not email:
            raise InvalidToken("Invalid token payload: missing email")

        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
