"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a router-wide auth dependency, each route declares its own
gate (get_current_principal, require_manager, require_admin), because
one router mixes open, authenticated, role-gated and ownership-gated
endpoints. Health and the credential routes are open.
"""

from fastapi import APIRouter

from taskhub.api.auth import router as auth_router
from taskhub.api.health import router as health_router
from taskhub.api.projects import router as projects_router
from taskhub.api.tasks import router as tasks_router
from taskhub.api.users import router as users_router

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — gates declared per route
api_router.include_router(users_router, tags=["users"])
api_router.include_router(projects_router, tags=["projects"])
api_router.include_router(tasks_router, tags=["tasks"])
