"""User listing (admin only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.permissions import require_admin
from taskhub.db.engine import get_db
from taskhub.schemas.auth import UserList, UserRead
from taskhub.services.user_service import UserService

router = APIRouter()


@router.get("/users", response_model=UserList, dependencies=[Depends(require_admin)])
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await UserService(db).list_users()
    return UserList(users=[UserRead.model_validate(u) for u in users])
