"""User-management service (admin CRUD plus self-view)."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sprintsync.config import Settings, get_settings
from sprintsync.models.task import Task
from sprintsync.models.user import User
from sprintsync.services.access import Caller, Operation, enforce
from sprintsync.services.auth import get_password_hash, get_user_by_username
from sprintsync.services.errors import BadRequestError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("username", "password", "is_admin", "skills")


class UserService:
    """Service for managing user accounts."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def _require(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_all(self, caller: Caller) -> list[User]:
        enforce(caller, None, Operation.ADMIN_ONLY)
        return self.db.query(User).order_by(User.id).all()

    def get_by_id(self, user_id: int, caller: Caller) -> User:
        """Return a profile visible to its owner or an admin.

        The ownership check runs first so non-admins cannot probe which ids exist.
        """
        enforce(caller, user_id, Operation.SELF_OR_ADMIN)
        return self._require(user_id)

    def get_tasks(self, user_id: int, caller: Caller) -> list[Task]:
        enforce(caller, user_id, Operation.SELF_OR_ADMIN)
        return self.db.query(Task).filter(Task.user_id == user_id).order_by(Task.id).all()

    def update(self, user_id: int, changes: dict[str, Any], caller: Caller) -> User:
        """Apply an admin's partial update; a new password is re-hashed."""
        enforce(caller, None, Operation.ADMIN_ONLY)

        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if not changes:
            raise BadRequestError("No fields to update")

        user = self._require(user_id)

        username = changes.get("username")
        if username is not None and username != user.username:
            if not username.strip():
                raise BadRequestError("Username cannot be empty")
            if get_user_by_username(self.db, username):
                raise ConflictError("Username already exists")
            user.username = username
        if "password" in changes:
            user.password_hash = get_password_hash(changes["password"], self.settings.bcrypt_rounds)
        if "is_admin" in changes:
            user.is_admin = changes["is_admin"]
        if "skills" in changes:
            user.skills = changes["skills"]

        try:
            self.db.commit()
        except IntegrityError:
            # Name taken by a registration that landed after the check above
            self.db.rollback()
            raise ConflictError("Username already exists") from None
        self.db.refresh(user)

        logger.info(f"Admin {caller.user_id} updated user {user_id}: {sorted(changes)}")
        return user

    def delete(self, user_id: int, caller: Caller) -> User:
        """Delete a user's tasks, then the user.

        The two deletes are committed separately; a failure in between leaves
        the user without tasks but still present.
        """
        enforce(caller, None, Operation.ADMIN_ONLY)
        user = self._require(user_id)

        removed = (
            self.db.query(Task).filter(Task.user_id == user_id).delete(synchronize_session=False)
        )
        self.db.commit()

        user = self._require(user_id)
        self.db.delete(user)
        self.db.commit()

        logger.info(f"Admin {caller.user_id} deleted user {user_id} and {removed} task(s)")
        return user
