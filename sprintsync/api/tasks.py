"""Task API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from sprintsync.api.dependencies import get_current_caller, get_task_service
from sprintsync.schemas.task import (
    DeleteTaskResponse,
    TaskCreate,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from sprintsync.services.access import Caller
from sprintsync.services.tasks import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
def get_tasks(
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get all tasks visible to the caller (every task for admins)."""
    return service.list_visible(caller)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get a specific task."""
    return service.get(task_id, caller)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Create a new task. Admins may assign it to another user."""
    return service.create(
        caller,
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
        total_minutes=task_data.total_minutes,
        user_id=task_data.user_id,
    )


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: int,
    status_data: TaskStatusUpdate,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Move a task to todo, in_progress or done."""
    return service.update_status(task_id, status_data.status, caller)


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Update only the supplied task fields."""
    return service.update(task_id, task_data.model_dump(exclude_unset=True), caller)


@router.delete("/{task_id}", response_model=DeleteTaskResponse)
def delete_task(
    task_id: int,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Delete a task (owner or admin only)."""
    task = service.delete(task_id, caller)
    return DeleteTaskResponse(
        message="Task deleted successfully", task=TaskResponse.model_validate(task)
    )
