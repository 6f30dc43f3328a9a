"""AI suggestion schemas."""

from typing import Literal

from pydantic import Field

from sprintsync.schemas.base import CamelModel


class SuggestRequest(CamelModel):
    """Request for a drafted task description and estimate."""

    title: str | None = Field(None, max_length=255)
    context: str | None = Field(None, max_length=2000)
    recommend_user: bool = False


class RecommendedUser(CamelModel):
    """Roster member whose skills best match the task."""

    id: int
    username: str
    skills: str | None = None
    reason: str | None = None


class SuggestResponse(CamelModel):
    """Drafted description, estimate and tags for a task."""

    suggested_description: str
    estimated_minutes: int
    suggested_tags: list[str] = []
    confidence: float
    recommended_user: RecommendedUser | None = None


class AiStatusResponse(CamelModel):
    mode: Literal["openai", "fallback"]
    description: str
