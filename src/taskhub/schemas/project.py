"""Pydantic schemas for projects and tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
Update schemas are all-optional — only non-None fields are applied.
Responses wrap the record in a named key ({"project": ...},
{"tasks": [...]}) so clients can tell payloads apart.

Request bodies accept camelCase keys too (assigneeId, as older clients
send them) alongside snake_case. Responses are snake_case only.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Request bodies: snake_case or camelCase keys.
_INPUT_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


# ─── Projects ────────────────────────────────────────────

class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None

    model_config = _INPUT_CONFIG


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None

    model_config = _INPUT_CONFIG


class ProjectRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    created_by_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    project: ProjectRead


class ProjectList(BaseModel):
    projects: list[ProjectRead]


# ─── Tasks ───────────────────────────────────────────────

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    assignee_id: int

    model_config = _INPUT_CONFIG


class TaskUpdate(BaseModel):
    """Status is a free-form label; no transition rules apply."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1, max_length=50)

    model_config = _INPUT_CONFIG


class TaskRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    project_id: int
    assignee_id: int
    created_by_id: int
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    task: TaskRead


class TaskList(BaseModel):
    tasks: list[TaskRead]
