"""Anthropic Messages API text-generation client."""

from __future__ import annotations

from typing import Any

from ..errors import EmptyResponseError
from .base import DEFAULT_TEMPERATURE, HttpTextGenerationClient

ANTHROPIC_API_VERSION = "2023-06-01"


class AnthropicTextClient(HttpTextGenerationClient):
    """Requests-based client for `POST /v1/messages`."""

    provider_id = "anthropic"
    provider_label = "Anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    default_model = "claude-sonnet-4-5-20250929"
    max_tokens = 2048

    def _auth_headers(self) -> dict[str, str]:
        return {"x-api-key": self.api_key, "anthropic-version": ANTHROPIC_API_VERSION}

    def generate_text(
        self,
        user_instruction: str,
        system_instruction: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return the first text block of a Messages API response."""

        self._require_api_key()
        payload = self._post_json(
            "/messages",
            {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "temperature": temperature,
                "system": system_instruction,
                "messages": [{"role": "user", "content": user_instruction}],
            },
        )
        return self._extract_text(payload)

    def _extract_text(self, payload: Any) -> str:
        content = payload.get("content") if isinstance(payload, dict) else None
        if not isinstance(content, list) or not content:
            raise EmptyResponseError(self.provider_label)
        first_block = content[0]
        text = first_block.get("text") if isinstance(first_block, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise EmptyResponseError(self.provider_label)
        return text.strip()

    def _probe_api_key(self) -> None:
        # No models endpoint for this API version; a minimal request proves the key.
        self.generate_text("test", "Reply with OK", 0)
