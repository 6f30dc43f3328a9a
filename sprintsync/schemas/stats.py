"""Admin statistics schemas."""

from datetime import datetime

from sprintsync.schemas.base import CamelModel


class TopUserStats(CamelModel):
    """Per-user time and completion figures."""

    user_id: int
    username: str
    is_admin: bool
    total_minutes: int
    total_hours: float
    task_count: int
    completed_tasks: int
    in_progress_tasks: int
    todo_tasks: int
    completion_rate: int


class TopUsersResponse(CamelModel):
    top_users: list[TopUserStats]
    total_users: int
    generated_at: datetime


class PlatformUserStats(CamelModel):
    total_users: int
    admin_users: int


class PlatformTaskStats(CamelModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    todo_tasks: int
    total_minutes: int
    total_hours: float
    completion_rate: int


class PlatformStatsResponse(CamelModel):
    """Platform-wide totals for the admin dashboard."""

    users: PlatformUserStats
    tasks: PlatformTaskStats
    generated_at: datetime
