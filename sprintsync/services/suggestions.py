"""Task suggestion service: OpenAI first, deterministic keyword fallback."""

import logging
import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from sprintsync.models.user import User
from sprintsync.services.errors import BadRequestError
from sprintsync.services.llm import LLMService
from sprintsync.services.llm_prompts import (
    TASK_SUGGESTION_SYSTEM_PROMPT,
    get_task_suggestion_prompt,
)

logger = logging.getLogger(__name__)

MIN_MINUTES = 15
MAX_MINUTES = 480
DEFAULT_MINUTES = 120
DEFAULT_CONFIDENCE = 0.7
MAX_TAGS = 5
DEFAULT_DESCRIPTION = (
    "Complete the specified task following software development best practices."
)

_WORD_RE = re.compile(r"[a-z0-9+#]+")
_SKILL_SPLIT_RE = re.compile(r"[,;/\s]+")


@dataclass(frozen=True)
class RosterMember:
    """A user offered to the recommender."""

    id: int
    username: str
    skills: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "RosterMember":
        return cls(id=user.id, username=user.username, skills=user.skills)

    def skill_keywords(self) -> list[str]:
        if not self.skills:
            return []
        return [s for s in _SKILL_SPLIT_RE.split(self.skills.lower()) if s]


@dataclass(frozen=True)
class FallbackTemplate:
    """Canned suggestion used when the LLM is unavailable."""

    description: str
    estimated_minutes: int
    tags: tuple[str, ...]
    confidence: float

    def render(self, title: str, context: str | None) -> dict[str, Any]:
        context_clause = f"Context: {context}. " if context else ""
        return {
            "suggestedDescription": self.description.format(
                title=title, context_clause=context_clause
            ),
            "estimatedMinutes": self.estimated_minutes,
            "suggestedTags": list(self.tags),
            "confidence": self.confidence,
        }


def title_contains(*keywords: str) -> Callable[[str], bool]:
    """Predicate matching a lowercased title containing any keyword."""
    return lambda title: any(keyword in title for keyword in keywords)


# Evaluated top to bottom, first match wins.
FALLBACK_RULES: list[tuple[Callable[[str], bool], FallbackTemplate]] = [
    (
        title_contains("bug", "fix", "error"),
        FallbackTemplate(
            description=(
                'Investigate and resolve the issue: "{title}". Steps: 1) Reproduce the bug, '
                "2) Identify root cause, 3) Implement fix, 4) Test thoroughly, "
                "5) Document the solution."
            ),
            estimated_minutes=120,
            tags=("bug", "urgent", "debugging"),
            confidence=0.85,
        ),
    ),
    (
        title_contains("feature", "implement", "add"),
        FallbackTemplate(
            description=(
                'Develop new feature: "{title}". Requirements: 1) Analyze requirements, '
                "2) Design architecture, 3) Implement core functionality, 4) Add tests, "
                "5) Update documentation."
            ),
            estimated_minutes=240,
            tags=("feature", "development", "enhancement"),
            confidence=0.8,
        ),
    ),
    (
        title_contains("test"),
        FallbackTemplate(
            description=(
                'Create comprehensive tests for: "{title}". Include: 1) Unit tests, '
                "2) Integration tests, 3) Edge cases, 4) Performance validation, "
                "5) Documentation updates."
            ),
            estimated_minutes=90,
            tags=("testing", "quality-assurance", "automation"),
            confidence=0.9,
        ),
    ),
    (
        title_contains("refactor", "optimize", "improve"),
        FallbackTemplate(
            description=(
                'Refactor and optimize: "{title}". Process: 1) Analyze current implementation, '
                "2) Identify improvement opportunities, 3) Refactor code, "
                "4) Validate performance gains, 5) Update tests."
            ),
            estimated_minutes=180,
            tags=("refactoring", "optimization", "code-quality"),
            confidence=0.75,
        ),
    ),
    (
        title_contains("doc"),
        FallbackTemplate(
            description=(
                'Create or update documentation for: "{title}". Include: '
                "1) Technical specifications, 2) Usage examples, 3) API documentation, "
                "4) Best practices, 5) Troubleshooting guide."
            ),
            estimated_minutes=60,
            tags=("documentation", "knowledge-sharing"),
            confidence=0.9,
        ),
    ),
]

DEFAULT_TEMPLATE = FallbackTemplate(
    description=(
        'Complete task: "{title}". {context_clause}Recommended approach: '
        "1) Break down into smaller subtasks, 2) Research requirements, "
        "3) Plan implementation, 4) Execute step by step, 5) Review and validate results."
    ),
    estimated_minutes=120,
    tags=("general", "planning"),
    confidence=0.6,
)


def select_template(title: str) -> FallbackTemplate:
    """Pick the first fallback template whose predicate matches the title."""
    title_lower = title.lower()
    for predicate, template in FALLBACK_RULES:
        if predicate(title_lower):
            return template
    return DEFAULT_TEMPLATE


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_suggestion(raw: dict[str, Any]) -> dict[str, Any]:
    """Fill defaults and clamp values into their documented ranges."""
    description = raw.get("suggestedDescription")
    if not isinstance(description, str) or not description.strip():
        description = DEFAULT_DESCRIPTION

    minutes = _as_number(raw.get("estimatedMinutes"))
    minutes = DEFAULT_MINUTES if minutes is None else round(minutes)
    minutes = max(MIN_MINUTES, min(MAX_MINUTES, minutes))

    tags = raw.get("suggestedTags")
    if isinstance(tags, list):
        tags = [str(tag) for tag in tags if tag][:MAX_TAGS]
    else:
        tags = ["general"]

    confidence = _as_number(raw.get("confidence"))
    confidence = DEFAULT_CONFIDENCE if confidence is None else confidence
    confidence = max(0.0, min(1.0, confidence))

    return {
        "suggestedDescription": description,
        "estimatedMinutes": int(minutes),
        "suggestedTags": tags,
        "confidence": confidence,
    }


def recommend_member(
    roster: Sequence[RosterMember],
    *texts: str | None,
    tags: Sequence[str] = (),
) -> dict[str, Any] | None:
    """Naive skill match: most overlapping keywords wins, ties keep roster order."""
    words: set[str] = set()
    for text in (*texts, *tags):
        if text:
            words.update(_WORD_RE.findall(text.lower()))
    if not words:
        return None

    best: RosterMember | None = None
    best_matches: list[str] = []
    for member in roster:
        matches = [skill for skill in member.skill_keywords() if skill in words]
        if len(matches) > len(best_matches):
            best, best_matches = member, matches

    if best is None:
        return None
    return {
        "id": best.id,
        "username": best.username,
        "skills": best.skills,
        "reason": f"Skills match: {', '.join(best_matches)}",
    }


def _match_llm_recommendation(
    suggested: Any, roster: Sequence[RosterMember]
) -> dict[str, Any] | None:
    """Accept the model's pick only if it names someone on the roster."""
    if not isinstance(suggested, dict):
        return None
    for member in roster:
        if suggested.get("id") == member.id or suggested.get("username") == member.username:
            reason = suggested.get("reason")
            return {
                "id": member.id,
                "username": member.username,
                "skills": member.skills,
                "reason": reason if isinstance(reason, str) else None,
            }
    return None


class SuggestionService:
    """Drafts task descriptions and estimates."""

    def __init__(self, llm_service: LLMService | None = None):
        self.llm_service = llm_service or LLMService()

    @property
    def mode(self) -> str:
        return "openai" if self.llm_service.is_configured else "fallback"

    def status(self) -> dict[str, str]:
        """Report whether suggestions come from OpenAI or the fallback rules."""
        if self.mode == "openai":
            description = f"Using OpenAI {self.llm_service.model} for AI suggestions"
        else:
            description = "Using intelligent fallback responses (OpenAI API key not configured)"
        return {"mode": self.mode, "description": description}

    def suggest(
        self,
        title: str | None,
        context: str | None = None,
        roster: Sequence[RosterMember] | None = None,
    ) -> dict[str, Any]:
        """Suggest a description, estimate and tags for a task title.

        Only a blank title raises; every other failure degrades to the
        keyword fallback.

        Returns:
            {
                "suggestedDescription": str,
                "estimatedMinutes": int,      # 15..480
                "suggestedTags": list[str],   # at most 5
                "confidence": float,          # 0..1
                "recommendedUser": dict,      # only when a roster is given
            }
        """
        if not title or not title.strip():
            raise BadRequestError("Title is required for AI suggestions")
        title = title.strip()
        context = context.strip() if context and context.strip() else None

        suggestion = None
        recommended = None
        if self.llm_service.is_configured:
            try:
                raw = self.llm_service.generate_json(
                    prompt=get_task_suggestion_prompt(
                        title,
                        context,
                        [{"id": m.id, "username": m.username, "skills": m.skills} for m in roster]
                        if roster
                        else None,
                    ),
                    system_prompt=TASK_SUGGESTION_SYSTEM_PROMPT,
                    temperature=0.7,
                    max_tokens=500,
                )
                suggestion = normalize_suggestion(raw)
                if roster:
                    recommended = _match_llm_recommendation(raw.get("recommendedUser"), roster)
                logger.info(f"OpenAI suggestion for '{title}': {suggestion}")
            except Exception as e:
                logger.error(f"OpenAI suggestion failed, falling back: {e}")
                suggestion = None
        else:
            logger.warning("OpenAI API key not configured, using fallback suggestion")

        if suggestion is None:
            suggestion = normalize_suggestion(select_template(title).render(title, context))

        if roster:
            if recommended is None:
                recommended = recommend_member(
                    roster, title, context, tags=suggestion["suggestedTags"]
                )
            suggestion["recommendedUser"] = recommended

        return suggestion
