"""Task suggestion tests (fallback rules, LLM path and API)."""

import json
from unittest.mock import MagicMock

import pytest

from sprintsync.api.dependencies import get_llm_service
from sprintsync.config import Settings
from sprintsync.services.errors import BadRequestError
from sprintsync.services.llm import LLMService
from sprintsync.services.suggestions import (
    DEFAULT_DESCRIPTION,
    RosterMember,
    SuggestionService,
    normalize_suggestion,
    recommend_member,
    select_template,
)



def offline_settings() -> Settings:
    return Settings(jwt_secret="test-secret", openai_api_key=None, _env_file=None)


def completion(content: str) -> MagicMock:
    """Build a fake chat completion returning ``content``."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    result = MagicMock()
    result.choices = [choice]
    return result


def llm_with_reply(content: str | None = None, error: Exception | None = None) -> LLMService:
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = completion(content)
    return LLMService(offline_settings(), client=client)


@pytest.fixture
def fallback_service():
    return SuggestionService(LLMService(offline_settings()))


ROSTER = [
    RosterMember(id=1, username="alice", skills="react, css, design"),
    RosterMember(id=2, username="bob", skills="python, postgres, testing"),
    RosterMember(id=3, username="carol", skills=None),
]


class TestFallbackRules:
    @pytest.mark.parametrize(
        ("title", "minutes", "first_tag"),
        [
            ("Fix login bug", 120, "bug"),
            ("Handle ERROR pages", 120, "bug"),
            ("Implement export", 240, "feature"),
            ("Add dark mode", 240, "feature"),
            ("Write unit tests", 90, "testing"),
            ("Refactor auth module", 180, "refactoring"),
            ("Update API docs", 60, "documentation"),
            ("Plan sprint review", 120, "general"),
        ],
    )
    def test_rule_selection(self, fallback_service, title, minutes, first_tag):
        suggestion = fallback_service.suggest(title)
        assert suggestion["estimatedMinutes"] == minutes
        assert suggestion["suggestedTags"][0] == first_tag
        assert title in suggestion["suggestedDescription"]

    def test_first_matching_rule_wins(self):
        # "fix" is checked before "feature"
        assert select_template("fix feature flag").tags[0] == "bug"
        assert select_template("add tests").tags[0] == "feature"

    def test_default_rule_includes_context(self, fallback_service):
        suggestion = fallback_service.suggest("Plan offsite", "for the whole team")
        assert "Context: for the whole team." in suggestion["suggestedDescription"]
        assert suggestion["confidence"] == 0.6

    def test_fallback_is_deterministic(self, fallback_service):
        assert fallback_service.suggest("Fix crash") == fallback_service.suggest("Fix crash")

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_blank_title_rejected(self, fallback_service, title):
        with pytest.raises(BadRequestError) as exc_info:
            fallback_service.suggest(title)
        assert exc_info.value.message == "Title is required for AI suggestions"

    def test_status_reports_fallback(self, fallback_service):
        status = fallback_service.status()
        assert status["mode"] == "fallback"
        assert "not configured" in status["description"]

    def test_placeholder_key_counts_as_missing(self):
        settings = Settings(openai_api_key="your_openai_api_key_here", _env_file=None)
        assert not LLMService(settings).is_configured


class TestNormalization:
    def test_defaults(self):
        result = normalize_suggestion({})
        assert result == {
            "suggestedDescription": DEFAULT_DESCRIPTION,
            "estimatedMinutes": 120,
            "suggestedTags": ["general"],
            "confidence": 0.7,
        }

    @pytest.mark.parametrize(("raw", "expected"), [(5, 15), (0, 15), (9999, 480), (90.4, 90)])
    def test_minutes_clamped(self, raw, expected):
        assert normalize_suggestion({"estimatedMinutes": raw})["estimatedMinutes"] == expected

    @pytest.mark.parametrize(("raw", "expected"), [(1.7, 1.0), (-0.2, 0.0), ("high", 0.7)])
    def test_confidence_clamped(self, raw, expected):
        assert normalize_suggestion({"confidence": raw})["confidence"] == expected

    def test_tags_truncated(self):
        tags = ["a", "b", "c", "d", "e", "f", "g"]
        assert normalize_suggestion({"suggestedTags": tags})["suggestedTags"] == tags[:5]

    def test_non_list_tags_replaced(self):
        assert normalize_suggestion({"suggestedTags": "oops"})["suggestedTags"] == ["general"]


class TestLLMPath:
    def test_uses_model_reply(self):
        reply = {
            "suggestedDescription": "1) Do it 2) Check it",
            "estimatedMinutes": 1000,
            "suggestedTags": ["backend", "api"],
            "confidence": 0.95,
        }
        llm = llm_with_reply(json.dumps(reply))
        service = SuggestionService(llm)

        suggestion = service.suggest("Build API", "REST endpoints")

        assert service.mode == "openai"
        assert suggestion["suggestedDescription"] == "1) Do it 2) Check it"
        assert suggestion["estimatedMinutes"] == 480
        assert suggestion["suggestedTags"] == ["backend", "api"]
        assert suggestion["confidence"] == 0.95
        assert "recommendedUser" not in suggestion

        kwargs = llm.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["messages"][0]["role"] == "system"
        assert 'Task Title: "Build API"' in kwargs["messages"][1]["content"]
        assert "REST endpoints" in kwargs["messages"][1]["content"]

    def test_markdown_fenced_reply_is_parsed(self):
        reply = '```json\n{"suggestedDescription": "Fenced", "estimatedMinutes": 60}\n```'
        suggestion = SuggestionService(llm_with_reply(reply)).suggest("Anything")
        assert suggestion["suggestedDescription"] == "Fenced"
        assert suggestion["estimatedMinutes"] == 60

    @pytest.mark.parametrize(
        "llm",
        [
            pytest.param(lambda: llm_with_reply("not json at all"), id="bad-json"),
            pytest.param(lambda: llm_with_reply("[1, 2]"), id="not-an-object"),
            pytest.param(lambda: llm_with_reply(""), id="empty"),
            pytest.param(lambda: llm_with_reply(error=TimeoutError("slow")), id="timeout"),
        ],
    )
    def test_failures_fall_back(self, llm):
        suggestion = SuggestionService(llm()).suggest("Fix flaky bug")
        assert suggestion["estimatedMinutes"] == 120
        assert suggestion["suggestedTags"] == ["bug", "urgent", "debugging"]
        assert suggestion["confidence"] == 0.85

    def test_model_recommendation_must_be_on_roster(self):
        reply = {
            "suggestedDescription": "d",
            "recommendedUser": {"id": 2, "username": "bob", "reason": "Knows Postgres"},
        }
        suggestion = SuggestionService(llm_with_reply(json.dumps(reply))).suggest(
            "Tune queries", roster=ROSTER
        )
        assert suggestion["recommendedUser"]["id"] == 2
        assert suggestion["recommendedUser"]["reason"] == "Knows Postgres"

    def test_unknown_model_recommendation_replaced_by_skill_match(self):
        reply = {
            "suggestedDescription": "d",
            "suggestedTags": ["python"],
            "recommendedUser": {"id": 99, "username": "mallory"},
        }
        suggestion = SuggestionService(llm_with_reply(json.dumps(reply))).suggest(
            "Speed up tests", roster=ROSTER
        )
        assert suggestion["recommendedUser"]["username"] == "bob"


class TestRecommendation:
    def test_best_skill_overlap_wins(self):
        picked = recommend_member(ROSTER, "Fix the react css layout")
        assert picked["username"] == "alice"
        assert picked["reason"] == "Skills match: react, css"

    def test_tags_count_toward_overlap(self):
        picked = recommend_member(ROSTER, "Something vague", tags=["testing"])
        assert picked["username"] == "bob"

    def test_no_overlap(self):
        assert recommend_member(ROSTER, "Order office snacks") is None

    def test_fallback_suggestion_with_roster(self, fallback_service):
        suggestion = fallback_service.suggest("Write python tests", roster=ROSTER)
        assert suggestion["recommendedUser"]["username"] == "bob"


class TestSuggestionApi:
    def test_requires_auth(self, client):
        response = client.post("/api/ai/suggest", json={"title": "Fix bug"})
        assert response.status_code == 401

    def test_suggest(self, client, auth_headers):
        response = client.post(
            "/api/ai/suggest", headers=auth_headers, json={"title": "Fix login bug"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["estimatedMinutes"] == 120
        assert data["suggestedTags"] == ["bug", "urgent", "debugging"]
        assert data["confidence"] == 0.85
        assert "recommendedUser" not in data

    def test_blank_title(self, client, auth_headers):
        response = client.post("/api/ai/suggest", headers=auth_headers, json={"title": " "})
        assert response.status_code == 400
        assert response.json() == {"error": "Title is required for AI suggestions"}

    def test_recommend_user_is_admin_only(self, client, auth_headers):
        response = client.post(
            "/api/ai/suggest",
            headers=auth_headers,
            json={"title": "Fix bug", "recommendUser": True},
        )
        assert response.status_code == 403

    def test_admin_gets_recommendation(self, client, admin_headers, register_user):
        designer = register_user("designer", skills="figma, css")
        response = client.post(
            "/api/ai/suggest",
            headers=admin_headers,
            json={"title": "Polish css for landing page", "recommendUser": True},
        )
        assert response.status_code == 200
        recommended = response.json()["recommendedUser"]
        assert recommended["id"] == designer.user_id
        assert recommended["username"] == "designer"

    def test_status(self, client, auth_headers):
        response = client.get("/api/ai/status", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["mode"] == "fallback"

    def test_status_with_configured_model(self, client, auth_headers):
        client.app.dependency_overrides[get_llm_service] = lambda: llm_with_reply("{}")
        response = client.get("/api/ai/status", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {
            "mode": "openai",
            "description": "Using OpenAI gpt-3.5-turbo for AI suggestions",
        }

    def test_suggest_with_configured_model(self, client, auth_headers):
        reply = json.dumps({"suggestedDescription": "From the model", "estimatedMinutes": 30})
        client.app.dependency_overrides[get_llm_service] = lambda: llm_with_reply(reply)
        response = client.post(
            "/api/ai/suggest", headers=auth_headers, json={"title": "Anything", "context": "x"}
        )
        assert response.status_code == 200
        assert response.json()["suggestedDescription"] == "From the model"
        assert response.json()["estimatedMinutes"] == 30
