"""Google Gemini `generateContent` text-generation client."""

from __future__ import annotations

from typing import Any

from ..errors import EmptyResponseError
from .base import DEFAULT_TEMPERATURE, HttpTextGenerationClient


class GeminiTextClient(HttpTextGenerationClient):
    """Requests-based Gemini client authenticated by the `key` query parameter."""

    provider_id = "gemini"
    provider_label = "Gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"
    default_model = "gemini-2.5-flash"
    max_output_tokens = 2048

    def _auth_params(self) -> dict[str, str]:
        return {"key": self.api_key}

    def generate_text(
        self,
        user_instruction: str,
        system_instruction: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return the concatenated text parts of the first candidate."""

        self._require_api_key()
        request_body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": user_instruction}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }
        if system_instruction:
            request_body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        payload = self._post_json(f"/models/{self.model}:generateContent", request_body)
        return self._extract_text(payload)

    def _extract_text(self, payload: Any) -> str:
        candidates = payload.get("candidates") if isinstance(payload, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise EmptyResponseError(self.provider_label)
        first = candidates[0] if isinstance(candidates[0], dict) else {}
        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise EmptyResponseError(self.provider_label)

        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ).strip()
        if not text:
            raise EmptyResponseError(self.provider_label)
        return text
