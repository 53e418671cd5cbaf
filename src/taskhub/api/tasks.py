"""Task API routes.

Learn: Task edits are gated by ownership, not by role: the task's
assignee may update it whatever their role, admins may update anything,
and everyone else gets 403 — even managers. The task is loaded first,
so a missing task is 404 before any permission decision.
Deleting a task is a role decision (manager or admin).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.dependencies import get_current_principal
from taskhub.auth.permissions import ensure_owner, require_manager
from taskhub.auth.principal import Principal
from taskhub.db.engine import get_db
from taskhub.schemas.auth import MessageResponse
from taskhub.schemas.project import TaskList, TaskRead, TaskResponse, TaskUpdate
from taskhub.services.project_service import ProjectService

router = APIRouter()


def _project_svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get("/my/tasks", response_model=TaskList)
async def my_tasks(
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(_project_svc),
):
    """Tasks assigned to the caller."""
    tasks = await svc.list_assigned_tasks(principal.id)
    return TaskList(tasks=[TaskRead.model_validate(t) for t in tasks])


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: ProjectService = Depends(_project_svc),
):
    """Update title, description or status of a task you're assigned to."""
    task = await svc.get_task(task_id)
    # Owner here is the assignee, not the task's creator.
    ensure_owner(principal, task.assignee_id, "You can only modify your own tasks")
    task = await svc.update_task(
        task,
        title=body.title,
        description=body.description,
        status=body.status,
    )
    return TaskResponse(task=TaskRead.model_validate(task))


@router.delete(
    "/tasks/{task_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_manager)],
)
async def delete_task(task_id: int, svc: ProjectService = Depends(_project_svc)):
    await svc.delete_task(task_id)
    return MessageResponse(message="Task deleted")
