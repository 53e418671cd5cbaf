"""User service — the credential store behind registration and login.

Learn: A thin repository over the users table. The auth service only
needs lookups by email/id and an insert; everything else about a user
is read from the token.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.roles import Role
from taskhub.db.models import User
from taskhub.errors import DuplicateError


class UserService:
    """Lookup and creation of user records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.EMPLOYEE,
    ) -> User:
        """Insert a user. Raises DuplicateError if the email is taken.

        Learn: The up-front lookup gives the normal 409; the IntegrityError
        catch covers two concurrent registrations racing past it.
        """
        if await self.get_by_email(email):
            raise DuplicateError("Email already registered")

        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateError("Email already registered")
        return user
