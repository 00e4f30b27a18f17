"""ElevenLabs text-to-speech HTTP client.

Responsibilities:
- Synthesize one text chunk into audio bytes.
- Validate the configured key and list account voices.
"""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger

from ..errors import EmptyResponseError
from ..llm.http_client import ProviderHttpClient
from ..models.datatypes import SynthesisRequest
from .voices import VoiceProfile

ELEVENLABS_BASE_URL = "https://api.elevenlabs.io/v1"


class SpeechClient(Protocol):
    """Protocol for chunk-level speech synthesis backends."""

    api_key: str

    def synthesize_speech(self, request: SynthesisRequest) -> bytes:
        """Return encoded audio bytes for one synthesis request."""

    def validate_api_key(self) -> bool:
        """Return whether the configured API key is accepted; never raises."""


class ElevenLabsSpeechClient(ProviderHttpClient):
    """Requests-based ElevenLabs client authenticated by the `xi-api-key` header."""

    provider_label = "ElevenLabs"

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = ELEVENLABS_BASE_URL,
        timeout_seconds: float = 120.0,
    ) -> None:
        """Initialize speech client settings."""

        super().__init__(api_key=api_key, base_url=base_url, timeout_seconds=timeout_seconds)

    def _auth_headers(self) -> dict[str, str]:
        return {"xi-api-key": self.api_key}

    def synthesize_speech(self, request: SynthesisRequest) -> bytes:
        """Return audio bytes from `POST /text-to-speech/{voice_id}`."""

        self._require_api_key()
        audio = self._post_binary(
            f"/text-to-speech/{request.voice_id}",
            {
                "text": request.text,
                "model_id": request.model_name,
                "voice_settings": request.voice_settings.as_payload(),
            },
            params={"output_format": request.output_format},
        )
        if not audio:
            raise EmptyResponseError(self.provider_label, "ElevenLabs speech response is empty.")
        return audio

    def validate_api_key(self) -> bool:
        """Probe `GET /user` and report whether the key is accepted."""

        try:
            self._require_api_key()
            self._get_json("/user")
        except Exception as exc:
            logger.debug("ElevenLabs API key validation failed: {}", type(exc).__name__)
            return False
        return True

    def list_voices(self) -> list[VoiceProfile]:
        """Return voices available to the account, in provider order."""

        self._require_api_key()
        payload = self._get_json("/voices")
        return self._parse_voices(payload)

    @staticmethod
    def _parse_voices(payload: Any) -> list[VoiceProfile]:
        entries = payload.get("voices") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            return []
        voices: list[VoiceProfile] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("voice_id"):
                continue
            voices.append(
                VoiceProfile(
                    voice_id=str(entry["voice_id"]),
                    name=str(entry.get("name") or ""),
                    category=str(entry.get("category") or ""),
                )
            )
        return voices
