"""User management schemas."""

from pydantic import Field

from sprintsync.schemas.auth import UserResponse
from sprintsync.schemas.base import CamelModel


class UserUpdate(CamelModel):
    """Admin update of a user; only supplied fields change."""

    username: str | None = Field(None, min_length=1, max_length=50)
    password: str | None = Field(None, min_length=1, max_length=128)
    is_admin: bool | None = None
    skills: str | None = Field(None, max_length=500)


class DeleteUserResponse(CamelModel):
    """Confirmation returned after deleting a user."""

    message: str
    user: UserResponse
