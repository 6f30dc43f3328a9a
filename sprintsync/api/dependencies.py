"""FastAPI dependencies for authentication, settings and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sprintsync.config import Settings
from sprintsync.database import get_db
from sprintsync.services.access import Caller, Operation, enforce
from sprintsync.services.auth import AuthService, caller_from_token
from sprintsync.services.llm import LLMService
from sprintsync.services.stats import StatsService
from sprintsync.services.suggestions import SuggestionService
from sprintsync.services.tasks import TaskService
from sprintsync.services.users import UserService

# auto_error=False so a missing header is reported as 401 by caller_from_token
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    return credentials.credentials if credentials else None


def get_current_caller(
    request: Request,
    token: Annotated[str | None, Depends(get_bearer_token)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Caller:
    """Get the authenticated caller from the JWT token.

    Only the signature and expiry are checked; the store is not consulted.
    """
    caller = caller_from_token(token, settings)
    request.state.caller = caller
    return caller


def require_admin(
    caller: Annotated[Caller, Depends(get_current_caller)],
) -> Caller:
    """Allow only admin callers (401 for bad tokens is raised first)."""
    enforce(caller, None, Operation.ADMIN_ONLY)
    return caller


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    return AuthService(db, settings)


def get_task_service(db: Annotated[Session, Depends(get_db)]) -> TaskService:
    return TaskService(db)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserService:
    return UserService(db, settings)


def get_stats_service(db: Annotated[Session, Depends(get_db)]) -> StatsService:
    return StatsService(db)


def get_llm_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LLMService:
    """Get LLM service instance."""
    return LLMService(settings)


def get_suggestion_service(
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
) -> SuggestionService:
    return SuggestionService(llm_service)
