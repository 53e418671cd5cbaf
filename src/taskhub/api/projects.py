"""Project API routes.

Learn: Role gates are declared per route with dependencies=[...]:
- read: any authenticated user
- create/update, list a project's tasks: manager or admin
- delete: admin only

The gate runs before the project is loaded, so a forbidden caller gets
403 even for a project id that doesn't exist.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.dependencies import get_current_principal
from taskhub.auth.permissions import require_admin, require_manager
from taskhub.auth.principal import Principal
from taskhub.db.engine import get_db
from taskhub.schemas.auth import MessageResponse
from taskhub.schemas.project import (
    ProjectCreate,
    ProjectList,
    ProjectRead,
    ProjectResponse,
    ProjectUpdate,
    TaskCreate,
    TaskList,
    TaskRead,
    TaskResponse,
)
from taskhub.services.project_service import ProjectService

router = APIRouter()


def _project_svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get(
    "/projects",
    response_model=ProjectList,
    dependencies=[Depends(get_current_principal)],
)
async def list_projects(svc: ProjectService = Depends(_project_svc)):
    projects = await svc.list_projects()
    return ProjectList(projects=[ProjectRead.model_validate(p) for p in projects])


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project(
    body: ProjectCreate,
    principal: Principal = Depends(require_manager),
    svc: ProjectService = Depends(_project_svc),
):
    project = await svc.create_project(
        title=body.title,
        description=body.description,
        created_by_id=principal.id,
    )
    return ProjectResponse(project=ProjectRead.model_validate(project))


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    dependencies=[Depends(get_current_principal)],
)
async def get_project(project_id: int, svc: ProjectService = Depends(_project_svc)):
    project = await svc.get_project(project_id)
    return ProjectResponse(project=ProjectRead.model_validate(project))


@router.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    dependencies=[Depends(require_manager)],
)
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    svc: ProjectService = Depends(_project_svc),
):
    """Partially update a project (title, description)."""
    project = await svc.update_project(
        project_id, title=body.title, description=body.description
    )
    return ProjectResponse(project=ProjectRead.model_validate(project))


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_project(project_id: int, svc: ProjectService = Depends(_project_svc)):
    """Delete a project and every task in it."""
    await svc.delete_project(project_id)
    return MessageResponse(message="Project deleted")


# ─── Tasks within a project ──────────────────────────────


@router.post("/projects/{project_id}/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    project_id: int,
    body: TaskCreate,
    principal: Principal = Depends(require_manager),
    svc: ProjectService = Depends(_project_svc),
):
    """Create a task in 'open' status, assigned to an existing user."""
    task = await svc.create_task(
        project_id=project_id,
        title=body.title,
        description=body.description,
        assignee_id=body.assignee_id,
        created_by_id=principal.id,
    )
    return TaskResponse(task=TaskRead.model_validate(task))


@router.get(
    "/projects/{project_id}/tasks",
    response_model=TaskList,
    dependencies=[Depends(require_manager)],
)
async def list_project_tasks(project_id: int, svc: ProjectService = Depends(_project_svc)):
    tasks = await svc.list_project_tasks(project_id)
    return TaskList(tasks=[TaskRead.model_validate(t) for t in tasks])
