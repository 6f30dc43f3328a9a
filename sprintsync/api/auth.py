"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from sprintsync.api.dependencies import get_auth_service, get_bearer_token
from sprintsync.schemas.auth import (
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    VerifyResponse,
)
from sprintsync.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    token, user = service.register(
        user_data.username,
        user_data.password,
        is_admin=user_data.is_admin,
        skills=user_data.skills,
    )
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with username and password."""
    token, user = service.login(credentials.username, credentials.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/verify", response_model=VerifyResponse)
def verify(
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Check a token and return fresh user data from the database."""
    user = service.verify(token)
    return VerifyResponse(user=UserResponse.model_validate(user))
