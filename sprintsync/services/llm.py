"""LLM service for OpenAI chat completions."""

import json
import logging
from typing import Any

import httpx
from openai import OpenAI, OpenAIError

from sprintsync.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    """Raised when a completion is requested without an API key."""


class LLMService:
    """Service for interacting with the OpenAI chat completions API."""

    def __init__(self, settings: Settings | None = None, client: OpenAI | None = None) -> None:
        self.settings = settings or get_settings()
        self.model = self.settings.openai_model
        self.timeout = self.settings.openai_timeout_seconds
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if an OpenAI API key is available."""
        return self._client is not None or self.settings.openai_configured

    @property
    def client(self) -> OpenAI:
        """Lazily build the client; retries are disabled so failures fall back fast."""
        if self._client is None:
            if not self.settings.openai_configured:
                raise LLMNotConfiguredError("OpenAI API key is not set")
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                max_retries=0,
            )
        return self._client

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        """Generate a response from the LLM."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ValueError("No response from OpenAI")
        return content

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> dict[str, Any]:
        """Generate structured JSON response from the LLM."""
        result = ""
        try:
            result = self.generate(
                prompt=prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            # Clean up response - remove markdown code blocks if present
            result = result.strip()
            if result.startswith("```json"):
                result = result[7:]
            if result.startswith("```"):
                result = result[3:]
            if result.endswith("```"):
                result = result[:-3]
            result = result.strip()

            parsed = json.loads(result)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse LLM response as JSON: {e}")
            logger.warning(f"Raw response: {result or 'N/A'}")
            raise
        except OpenAIError as e:
            logger.error(f"Error calling OpenAI: {e}")
            raise

        if not isinstance(parsed, dict):
            raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
        return parsed
