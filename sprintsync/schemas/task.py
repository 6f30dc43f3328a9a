"""Task schemas."""

from datetime import datetime

from pydantic import Field

from sprintsync.models.enums import TaskStatus
from sprintsync.schemas.base import CamelModel


class TaskCreate(CamelModel):
    """Create a new task."""

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    status: str | None = None
    total_minutes: int | None = Field(None, ge=0)
    user_id: int | None = None  # honoured for admins only


class TaskStatusUpdate(CamelModel):
    """Move a task to another status."""

    status: str | None = None


class TaskUpdate(CamelModel):
    """Partial task update."""

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    status: str | None = None
    total_minutes: int | None = Field(None, ge=0)


class TaskResponse(CamelModel):
    """Task response."""

    id: int
    title: str
    description: str | None
    status: TaskStatus
    total_minutes: int
    user_id: int | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeleteTaskResponse(CamelModel):
    """Confirmation returned after deleting a task."""

    message: str
    task: TaskResponse
