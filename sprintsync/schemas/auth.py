"""Authentication schemas."""

from datetime import datetime

from pydantic import Field

from sprintsync.schemas.base import CamelModel


class UserRegister(CamelModel):
    """User registration request."""

    username: str | None = Field(None, max_length=50)
    password: str | None = Field(None, max_length=128)
    is_admin: bool = False
    skills: str | None = Field(None, max_length=500)


class UserLogin(CamelModel):
    """User login request."""

    username: str | None = None
    password: str | None = None


class UserResponse(CamelModel):
    """User information response. Never carries the password hash."""

    id: int
    username: str
    is_admin: bool
    skills: str | None = None
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    """Authentication response with token and user info."""

    token: str
    user: UserResponse


class VerifyResponse(CamelModel):
    """Token verification response with fresh user data."""

    user: UserResponse
