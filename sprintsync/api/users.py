"""User management API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sprintsync.api.dependencies import get_current_caller, get_user_service, require_admin
from sprintsync.schemas.auth import UserResponse
from sprintsync.schemas.task import TaskResponse
from sprintsync.schemas.user import DeleteUserResponse, UserUpdate
from sprintsync.services.access import Caller
from sprintsync.services.users import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def get_users(
    caller: Annotated[Caller, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get all users (admin only)."""
    return service.list_all(caller)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user by id (admin or own profile)."""
    return service.get_by_id(user_id, caller)


@router.get("/{user_id}/tasks", response_model=list[TaskResponse])
def get_user_tasks(
    user_id: int,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get tasks for a specific user (admin or own tasks)."""
    return service.get_tasks(user_id, caller)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    caller: Annotated[Caller, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user (admin only)."""
    return service.update(user_id, user_data.model_dump(exclude_unset=True), caller)


@router.delete("/{user_id}", response_model=DeleteUserResponse)
def delete_user(
    user_id: int,
    caller: Annotated[Caller, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a user and all of their tasks (admin only)."""
    user = service.delete(user_id, caller)
    return DeleteUserResponse(
        message="User deleted successfully", user=UserResponse.model_validate(user)
    )
