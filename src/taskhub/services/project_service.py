"""Project and task service — CRUD behind the /projects and /tasks routes.

Learn: Authorization is NOT done here. Role gates run as route
dependencies and the ownership check runs in the route after the record
is loaded; this layer only reads and writes rows and reports missing
ones with NotFoundError.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db.models import Project, Task, utcnow
from taskhub.errors import NotFoundError, ValidationError
from taskhub.services.user_service import UserService


class ProjectService:
    """Business logic for projects and the tasks inside them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Projects ────────────────────────────────────────

    async def create_project(
        self, title: str, description: Optional[str], created_by_id: int
    ) -> Project:
        project = Project(
            title=title, description=description, created_by_id=created_by_id
        )
        self.db.add(project)
        await self.db.commit()
        return project

    async def list_projects(self) -> list[Project]:
        result = await self.db.execute(select(Project).order_by(Project.id))
        return list(result.scalars().all())

    async def get_project(self, project_id: int) -> Project:
        project = await self.db.get(Project, project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    async def update_project(
        self,
        project_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Project:
        """Partial update — only non-None fields are applied."""
        project = await self.get_project(project_id)
        if title is not None:
            project.title = title
        if description is not None:
            project.description = description
        project.updated_at = utcnow()
        await self.db.commit()
        return project

    async def delete_project(self, project_id: int) -> None:
        """Delete a project together with its tasks."""
        project = await self.get_project(project_id)
        await self.db.execute(delete(Task).where(Task.project_id == project.id))
        await self.db.delete(project)
        await self.db.commit()

    # ─── Tasks ───────────────────────────────────────────

    async def create_task(
        self,
        project_id: int,
        title: str,
        description: Optional[str],
        assignee_id: int,
        created_by_id: int,
    ) -> Task:
        """Create a task in 'open' status.

        Learn: A missing project is a 404 (it's in the URL), but a missing
        assignee is a 400 — it's bad input in the request body.
        """
        project = await self.get_project(project_id)
        assignee = await UserService(self.db).get_by_id(assignee_id)
        if not assignee:
            raise ValidationError("Assignee not found")

        task = Task(
            title=title,
            description=description,
            project_id=project.id,
            assignee_id=assignee.id,
            created_by_id=created_by_id,
            status="open",
        )
        self.db.add(task)
        await self.db.commit()
        return task

    async def get_task(self, task_id: int) -> Task:
        task = await self.db.get(Task, task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    async def list_project_tasks(self, project_id: int) -> list[Task]:
        await self.get_project(project_id)
        result = await self.db.execute(
            select(Task).where(Task.project_id == project_id).order_by(Task.id)
        )
        return list(result.scalars().all())

    async def list_assigned_tasks(self, assignee_id: int) -> list[Task]:
        result = await self.db.execute(
            select(Task).where(Task.assignee_id == assignee_id).order_by(Task.id)
        )
        return list(result.scalars().all())

    async def update_task(
        self,
        task: Task,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Task:
        """Partial update of an already-loaded (and already-authorized) task."""
        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if status is not None:
            task.status = status
        task.updated_at = utcnow()
        await self.db.commit()
        return task

    async def delete_task(self, task_id: int) -> None:
        task = await self.get_task(task_id)
        await self.db.delete(task)
        await self.db.commit()
