"""Pydantic schemas for registration, login and user views.

Learn: `role` arrives as a plain string and is parsed against the Role
enum in the route (Role.parse), so an unknown role gets a specific 400
message instead of a generic validation error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from taskhub.auth.roles import Role


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PrincipalRead(BaseModel):
    """The identity carried in a token (no timestamps, no hash)."""
    id: int
    name: str
    email: str
    role: Role


class TokenResponse(BaseModel):
    token: str
    user: PrincipalRead


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime

    model_config = {"from_attributes": True}


class UserList(BaseModel):
    users: list[UserRead]


class MeResponse(BaseModel):
    user: PrincipalRead


class MessageResponse(BaseModel):
    message: str
