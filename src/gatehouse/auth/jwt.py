"""JWT session token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token is
three base64url segments (header.payload.signature) signed with HMAC-SHA256
over a shared secret, so any holder of the secret can verify it without a
database lookup. There is no revocation: expiry is the only lifecycle bound,
and changing the secret invalidates every outstanding token.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from gatehouse.errors import InvalidToken


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    expires_at: datetime


class TokenCodec:
    """Signs and verifies session tokens with one process-wide secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def sign(self, subject_id: str, expires_at: Optional[datetime] = None) -> str:
        """Create a token for subject_id, expiring after the TTL by default."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject_id,
            "exp": expires_at or now + self.ttl,
            "iat": now,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Raises InvalidToken for a bad signature, a malformed token,
        missing claims, or an expiry at or before now. The message is the
        same in every case.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError:
            raise InvalidToken()

        subject_id = payload["sub"]
        if not isinstance(subject_id, str) or not subject_id:
            raise InvalidToken()
        return TokenClaims(
            subject_id=subject_id,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
