"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current principal from the request.

get_current_principal is the authentication gate: it reads the
Authorization header, verifies the bearer token with the app's
TokenService and returns the Principal. It never touches the database —
everything it needs is inside the token.
"""

from typing import Optional

from fastapi import Header, Request

from taskhub.auth.principal import Principal
from taskhub.auth.tokens import TokenError, TokenService
from taskhub.errors import AuthenticationError


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header value.

    Accepts "Bearer <token>" with any casing of the scheme. Anything else
    (missing header, other schemes, no token) is an authentication error.
    """
    if not authorization:
        raise AuthenticationError("Authentication required")

    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthenticationError("Malformed Authorization header")
    return parts[1].strip()


async def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Principal:
    """Extract current principal (required — 401 if missing or invalid)."""
    token = extract_bearer_token(authorization)
    try:
        principal = get_token_service(request).verify(token)
    except TokenError as e:
        raise AuthenticationError(str(e))

    request.state.principal = principal
    return principal
