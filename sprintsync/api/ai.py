"""AI assistant API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sprintsync.api.dependencies import (
    get_current_caller,
    get_suggestion_service,
    get_user_service,
)
from sprintsync.schemas.ai import AiStatusResponse, SuggestRequest, SuggestResponse
from sprintsync.services.access import Caller
from sprintsync.services.suggestions import RosterMember, SuggestionService
from sprintsync.services.users import UserService

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/suggest", response_model=SuggestResponse, response_model_exclude_none=True)
def suggest_task_description(
    request_data: SuggestRequest,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[SuggestionService, Depends(get_suggestion_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Draft a description and time estimate for a task title.

    With ``recommendUser`` an admin also gets the team member whose skills
    best fit the task.
    """
    roster = None
    if request_data.recommend_user:
        roster = [RosterMember.from_user(user) for user in user_service.list_all(caller)]
    return service.suggest(request_data.title, request_data.context, roster)


@router.get("/status", response_model=AiStatusResponse)
def get_ai_status(
    _caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[SuggestionService, Depends(get_suggestion_service)],
):
    """Report whether suggestions use OpenAI or the fallback rules."""
    return service.status()
