"""Auth API — registration, login, logout, current principal.

Learn: Routes for the credential lifecycle:
- POST /register → create an account, returns {token, user}
- POST /login → email/password → {token, user}
- POST /logout → nothing to do server-side; the client drops the token
- GET /me → the principal decoded from the bearer token
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.dependencies import get_current_principal
from taskhub.auth.principal import Principal
from taskhub.auth.roles import Role
from taskhub.db.engine import get_db
from taskhub.schemas.auth import (
    LoginRequest,
    MeResponse,
    MessageResponse,
    PrincipalRead,
    RegisterRequest,
    TokenResponse,
)
from taskhub.services.auth_service import AuthService

router = APIRouter()


def _auth_svc(request: Request, db: AsyncSession = Depends(get_db)) -> AuthService:
    state = request.app.state
    return AuthService(
        db,
        hasher=state.password_hasher,
        tokens=state.token_service,
        registration_max_role=state.settings.registration_max_role,
    )


def _token_response(token: str, principal: Principal) -> TokenResponse:
    return TokenResponse(token=token, user=PrincipalRead(**principal.to_dict()))


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account and sign them in."""
    role = Role.parse(body.role) if body.role is not None else None
    token, principal = await svc.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=role,
    )
    return _token_response(token, principal)


# ─── Login / Logout ──────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → signed token."""
    token, principal = await svc.login(body.email, body.password)
    return _token_response(token, principal)


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """Tokens are stateless; there is nothing to revoke server-side."""
    return MessageResponse(message="Logged out (client should delete token)")


# ─── Current principal ──────────────────────────────────


@router.get("/me", response_model=MeResponse)
async def get_me(principal: Principal = Depends(get_current_principal)):
    """Who the bearer token says you are."""
    return MeResponse(user=PrincipalRead(**principal.to_dict()))
