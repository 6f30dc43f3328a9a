"""SQLAlchemy models."""

from sprintsync.models.enums import TaskStatus
from sprintsync.models.task import Task
from sprintsync.models.user import User

__all__ = [
    "User",
    "Task",
    "TaskStatus",
]
