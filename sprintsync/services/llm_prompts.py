"""LLM prompt templates for task suggestions."""

TASK_SUGGESTION_SYSTEM_PROMPT = """You are an expert software development task planning assistant. You help break down tasks, estimate time, and provide actionable descriptions. Always respond with valid JSON in the exact format requested."""


def get_task_suggestion_prompt(
    title: str,
    context: str | None = None,
    roster: list[dict] | None = None,
) -> str:
    """Generate prompt for drafting a task description and estimate.

    Args:
        title: Task title entered by the user
        context: Optional free-text context
        roster: Optional list of dicts with username, id, skills
    """
    context_text = f"\nAdditional context: {context}" if context else ""

    roster_text = ""
    recommend_field = ""
    recommend_rule = ""
    if roster:
        lines = []
        for member in roster:
            skills = member.get("skills") or "no skills listed"
            lines.append(f"- {member['username']} (id {member['id']}): {skills}")
        roster_text = "\n\nTeam members:\n" + "\n".join(lines)
        recommend_field = ',\n  "recommendedUser": {"id": 1, "username": "name", "reason": "why"}'
        recommend_rule = (
            "\n- recommendedUser: The team member whose skills best fit the task "
            "(use an id and username from the list above, or null if nobody fits)"
        )

    return f"""Task Title: "{title}"{context_text}{roster_text}

Please analyze this task and provide a structured response in the following JSON format:

{{
  "suggestedDescription": "Detailed step-by-step description of how to complete this task",
  "estimatedMinutes": 120,
  "suggestedTags": ["tag1", "tag2", "tag3"],
  "confidence": 0.85{recommend_field}
}}

Guidelines:
- suggestedDescription: Provide a clear, actionable description with 3-5 numbered steps
- estimatedMinutes: Realistic time estimate in minutes (15-480 range typical)
- suggestedTags: 2-4 relevant tags for categorization (lowercase, hyphenated)
- confidence: Your confidence in the suggestion (0.0-1.0, where 1.0 is highest confidence){recommend_rule}

Consider the type of task (bug fix, feature, refactoring, testing, documentation, etc.) and provide appropriate guidance."""
