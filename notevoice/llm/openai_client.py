"""Chat-completions text-generation clients (OpenAI and xAI).

Responsibilities:
- Send chat-completions requests with bearer authentication.
- Extract the first assistant message from the response envelope.
"""

from __future__ import annotations

from typing import Any

from ..errors import EmptyResponseError
from .base import DEFAULT_TEMPERATURE, HttpTextGenerationClient


class OpenAITextClient(HttpTextGenerationClient):
    """Requests-based OpenAI chat-completions client."""

    provider_id = "openai"
    provider_label = "OpenAI"
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o-mini"

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _chat_payload(
        self, user_instruction: str, system_instruction: str, temperature: float
    ) -> dict[str, Any]:
        """Build the chat-completions request body."""

        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_instruction},
            ],
            "temperature": temperature,
            "max_tokens": 2048,
        }

    def generate_text(
        self,
        user_instruction: str,
        system_instruction: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return the first assistant text response from a chat-completions request."""

        self._require_api_key()
        payload = self._post_json(
            "/chat/completions",
            self._chat_payload(user_instruction, system_instruction, temperature),
        )
        return self._extract_message_text(payload)

    def _extract_message_text(self, payload: Any) -> str:
        """Extract first assistant message text from a chat-completions payload."""

        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices:
            raise EmptyResponseError(self.provider_label)

        first_choice = choices[0]
        message = first_choice.get("message") if isinstance(first_choice, dict) else None
        if not isinstance(message, dict):
            raise EmptyResponseError(self.provider_label)

        text = self._message_content_to_text(message.get("content")).strip()
        if not text:
            raise EmptyResponseError(self.provider_label)
        return text

    @staticmethod
    def _message_content_to_text(content: Any) -> str:
        """Convert message content variants into a plain text string."""

        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(
                item["text"]
                for item in content
                if isinstance(item, dict)
                and item.get("type") == "text"
                and isinstance(item.get("text"), str)
            )
        return ""


class XAITextClient(OpenAITextClient):
    """xAI (Grok) client; the API is chat-completions compatible."""

    provider_id = "xai"
    provider_label = "xAI"
    default_base_url = "https://api.x.ai/v1"
    default_model = "grok-4-1-fast-reasoning"

    def _chat_payload(
        self, user_instruction: str, system_instruction: str, temperature: float
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_instruction},
            ],
            "temperature": temperature,
            "stream": False,
        }
