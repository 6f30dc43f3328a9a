"""Pydantic schemas for API request/response validation."""

from sprintsync.schemas.ai import AiStatusResponse, RecommendedUser, SuggestRequest, SuggestResponse
from sprintsync.schemas.auth import (
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    VerifyResponse,
)
from sprintsync.schemas.stats import PlatformStatsResponse, TopUsersResponse
from sprintsync.schemas.task import (
    DeleteTaskResponse,
    TaskCreate,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from sprintsync.schemas.user import DeleteUserResponse, UserUpdate

__all__ = [
    "AiStatusResponse",
    "AuthResponse",
    "DeleteTaskResponse",
    "DeleteUserResponse",
    "PlatformStatsResponse",
    "RecommendedUser",
    "SuggestRequest",
    "SuggestResponse",
    "TaskCreate",
    "TaskResponse",
    "TaskStatusUpdate",
    "TaskUpdate",
    "TopUsersResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "UserUpdate",
    "VerifyResponse",
]
