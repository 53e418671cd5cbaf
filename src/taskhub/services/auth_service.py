"""Auth service — registration and login.

Learn: Both flows end the same way: build a Principal from the user row
and sign it into a token. The password hash is computed/checked in the
threadpool because bcrypt is deliberately slow and would otherwise stall
the event loop for every other request.

Login answers "Invalid credentials" for an unknown email and for a wrong
password alike, and burns one bcrypt verify in the unknown-email case so
the two can't be told apart by timing either.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from taskhub.auth.password import PasswordHasher
from taskhub.auth.principal import Principal
from taskhub.auth.roles import DEFAULT_ROLE, Role
from taskhub.auth.tokens import TokenService
from taskhub.db.models import User
from taskhub.errors import AuthenticationError, AuthorizationError
from taskhub.services.user_service import UserService

logger = structlog.get_logger()


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, name=user.name, email=user.email, role=Role(user.role))


class AuthService:
    """Turns credentials into signed tokens."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        tokens: TokenService,
        registration_max_role: Role = Role.ADMIN,
    ):
        self.users = UserService(db)
        self.hasher = hasher
        self.tokens = tokens
        self.registration_max_role = registration_max_role

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[Role] = None,
    ) -> tuple[str, Principal]:
        """Create an account and return (token, principal).

        Learn: Callers may pick their own role. Anything above
        registration_max_role is refused; anything above employee is
        logged, because self-assigned elevation is worth an audit trail.
        """
        role = role or DEFAULT_ROLE
        if not self.registration_max_role.at_least(role):
            raise AuthorizationError(
                f"Self-registration is limited to {self.registration_max_role.value} role or lower"
            )

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        user = await self.users.create(
            name=name, email=email, password_hash=password_hash, role=role
        )

        if role != DEFAULT_ROLE:
            logger.warning("auth.elevated_self_registration", user_id=user.id, role=role.value)
        logger.info("auth.registered", user_id=user.id, role=role.value)

        principal = principal_for(user)
        return self.tokens.issue(principal), principal

    async def login(self, email: str, password: str) -> tuple[str, Principal]:
        """Check credentials and return (token, principal)."""
        user = await self.users.get_by_email(email)
        if user is None:
            await run_in_threadpool(self.hasher.burn, password)
            logger.info("auth.login_failed", reason="unknown_email")
            raise AuthenticationError("Invalid credentials")

        ok = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not ok:
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise AuthenticationError("Invalid credentials")

        logger.info("auth.login", user_id=user.id)
        principal = principal_for(user)
        return self.tokens.issue(principal), principal
