"""Read-only aggregation over users and tasks for the admin dashboard."""

import math
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from sprintsync.models.enums import TaskStatus
from sprintsync.models.task import Task
from sprintsync.models.user import User

TOP_USERS_LIMIT = 20


def minutes_to_hours(minutes: int) -> float:
    """Convert minutes to hours rounded to 2 decimal places."""
    return round(minutes / 60, 2)


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, 0 when there are none."""
    if total <= 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def _count_status(status: TaskStatus):
    return func.count(case((Task.status == status, 1)))


class StatsService:
    """Service computing platform and per-user statistics."""

    def __init__(self, db: Session):
        self.db = db

    def top_users(self, limit: int = TOP_USERS_LIMIT) -> dict[str, Any]:
        """Users ranked by total logged minutes, most first."""
        total_minutes = func.coalesce(func.sum(Task.total_minutes), 0)
        rows = (
            self.db.query(
                User.id,
                User.username,
                User.is_admin,
                total_minutes.label("total_minutes"),
                func.count(Task.id).label("task_count"),
                _count_status(TaskStatus.DONE).label("completed_tasks"),
                _count_status(TaskStatus.IN_PROGRESS).label("in_progress_tasks"),
                _count_status(TaskStatus.TODO).label("todo_tasks"),
            )
            .outerjoin(Task, Task.user_id == User.id)
            .group_by(User.id, User.username, User.is_admin)
            .order_by(total_minutes.desc(), User.id)
            .limit(limit)
            .all()
        )

        top = []
        for row in rows:
            minutes = int(row.total_minutes or 0)
            top.append(
                {
                    "user_id": row.id,
                    "username": row.username,
                    "is_admin": bool(row.is_admin),
                    "total_minutes": minutes,
                    "total_hours": minutes_to_hours(minutes),
                    "task_count": row.task_count,
                    "completed_tasks": row.completed_tasks,
                    "in_progress_tasks": row.in_progress_tasks,
                    "todo_tasks": row.todo_tasks,
                    "completion_rate": completion_rate(row.completed_tasks, row.task_count),
                }
            )

        return {
            "top_users": top,
            "total_users": len(top),
            "generated_at": datetime.now(UTC),
        }

    def platform_stats(self) -> dict[str, Any]:
        """User and task totals across the whole platform."""
        user_row = self.db.query(
            func.count(User.id).label("total_users"),
            func.count(case((User.is_admin.is_(True), 1))).label("admin_users"),
        ).one()

        task_row = self.db.query(
            func.count(Task.id).label("total_tasks"),
            _count_status(TaskStatus.DONE).label("completed_tasks"),
            _count_status(TaskStatus.IN_PROGRESS).label("in_progress_tasks"),
            _count_status(TaskStatus.TODO).label("todo_tasks"),
            func.coalesce(func.sum(Task.total_minutes), 0).label("total_minutes"),
        ).one()

        total_minutes = int(task_row.total_minutes or 0)
        return {
            "users": {
                "total_users": user_row.total_users,
                "admin_users": user_row.admin_users,
            },
            "tasks": {
                "total_tasks": task_row.total_tasks,
                "completed_tasks": task_row.completed_tasks,
                "in_progress_tasks": task_row.in_progress_tasks,
                "todo_tasks": task_row.todo_tasks,
                "total_minutes": total_minutes,
                "total_hours": minutes_to_hours(total_minutes),
                "completion_rate": completion_rate(
                    task_row.completed_tasks, task_row.total_tasks
                ),
            },
            "generated_at": datetime.now(UTC),
        }
