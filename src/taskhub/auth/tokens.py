"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the whole principal (id, name, email, role) plus iat/exp, signed
with HMAC-SHA256 over the header and payload. Verifying needs only the
secret — no session table.

Trade-off: nothing can revoke a token before it expires. "Logout" is the
client throwing the token away, so the TTL (default 24h) bounds how long
a leaked token stays useful.

The secret is handed to TokenService at construction. Tests build a
service per test with their own secret.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from taskhub.auth.principal import Principal
from taskhub.auth.roles import Role

_REQUIRED_CLAIMS = ["sub", "name", "email", "role", "exp", "iat"]


class TokenError(Exception):
    """Raised when token creation/verification fails."""


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(
        self, principal: Principal, issued_at: Optional[datetime] = None
    ) -> str:
        """Create a signed token for `principal`, expiring at issued_at + ttl."""
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": str(principal.id),
            "name": principal.name,
            "email": principal.email,
            "role": principal.role.value,
            "iat": iat,
            "exp": iat + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        """Verify signature and expiry, and rebuild the Principal.

        Raises TokenError on a bad signature, malformed token or claims,
        or when the current time is at or past `exp`. No clock-skew leeway.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

        name, email = payload["name"], payload["email"]
        if not isinstance(name, str) or not isinstance(email, str):
            raise TokenError("Invalid token: malformed claims")
        try:
            return Principal(
                id=int(payload["sub"]),
                name=name,
                email=email,
                role=Role(payload["role"]),
            )
        except (TypeError, ValueError):
            raise TokenError("Invalid token: malformed claims")
