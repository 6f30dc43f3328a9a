"""Task service: CRUD and status changes gated by the access-control policy."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from sprintsync.models.enums import TaskStatus
from sprintsync.models.task import Task
from sprintsync.models.user import User
from sprintsync.services.access import Caller, Operation, enforce
from sprintsync.services.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status", "total_minutes")


def _validate_status(value: Any) -> TaskStatus:
    if not TaskStatus.is_valid(value):
        raise BadRequestError(f"Invalid status. Must be one of: {', '.join(TaskStatus.values())}")
    return TaskStatus(value)


def _validate_minutes(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise BadRequestError("totalMinutes must be a non-negative integer")
    return value


class TaskService:
    """Service for reading and mutating tasks on behalf of a caller."""

    def __init__(self, db: Session):
        self.db = db

    def list_visible(self, caller: Caller) -> list[Task]:
        """Admins see every task, everyone else only their own."""
        query = self.db.query(Task)
        if not caller.is_admin:
            query = query.filter(Task.user_id == caller.user_id)
        return query.order_by(Task.id).all()

    def _get_owned(self, task_id: int, caller: Caller) -> Task:
        """Fetch a task the caller is allowed to touch (404 before 403)."""
        task = self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        enforce(caller, task.user_id, Operation.SELF_OR_ADMIN)
        return task

    def get(self, task_id: int, caller: Caller) -> Task:
        return self._get_owned(task_id, caller)

    def create(
        self,
        caller: Caller,
        title: str | None,
        description: str | None = None,
        status: str | None = None,
        total_minutes: int | None = None,
        user_id: int | None = None,
    ) -> Task:
        """Create a task owned by the caller, or by ``user_id`` when an admin assigns it."""
        if not title or not title.strip():
            raise BadRequestError("Title is required")

        task_status = TaskStatus.TODO if status is None else _validate_status(status)
        minutes = 0 if total_minutes is None else _validate_minutes(total_minutes)

        owner_id = caller.user_id
        if user_id is not None and caller.is_admin:
            if self.db.get(User, user_id) is None:
                raise BadRequestError("Assigned user does not exist")
            owner_id = user_id

        task = Task(
            title=title.strip(),
            description=description,
            status=task_status,
            total_minutes=minutes,
            user_id=owner_id,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        logger.info(f"User {caller.user_id} created task {task.id} for user {owner_id}")
        return task

    def update_status(self, task_id: int, status: str | None, caller: Caller) -> Task:
        """Move a task to any status; the value is checked before the store is touched."""
        if status is None:
            raise BadRequestError("Status is required")
        new_status = _validate_status(status)

        task = self._get_owned(task_id, caller)
        task.status = new_status
        task.updated_at = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update(self, task_id: int, changes: dict[str, Any], caller: Caller) -> Task:
        """Apply a partial update. Keys outside UPDATABLE_FIELDS are ignored."""
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if not changes:
            raise BadRequestError("No fields to update")

        if "status" in changes:
            changes["status"] = _validate_status(changes["status"])
        if "total_minutes" in changes:
            changes["total_minutes"] = _validate_minutes(changes["total_minutes"])
        if "title" in changes:
            if not changes["title"].strip():
                raise BadRequestError("Title cannot be empty")
            changes["title"] = changes["title"].strip()

        task = self._get_owned(task_id, caller)
        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = datetime.now(UTC)

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, task_id: int, caller: Caller) -> Task:
        """Delete a task and return the removed record."""
        task = self._get_owned(task_id, caller)
        self.db.delete(task)
        self.db.commit()

        logger.info(f"User {caller.user_id} deleted task {task_id}")
        return task
