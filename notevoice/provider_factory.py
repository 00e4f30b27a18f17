"""Provider factory helpers for summarization and speech stages.

Responsibilities:
- Resolve backend identifiers to concrete client implementations.
- Keep orchestration independent from concrete provider class construction.

Notes:
- Text backends are registered in `llm.backends.TEXT_BACKENDS`.
- ElevenLabs is the only speech backend.
"""

from __future__ import annotations

from .errors import UnknownBackendError
from .llm.backends import SUPPORTED_BACKEND_IDS, TEXT_BACKENDS
from .llm.base import TextGenerationClient
from .tts.elevenlabs_client import ElevenLabsSpeechClient, SpeechClient


class ProviderFactory:
    """Factory for provider-backed stage clients used by the pipeline."""

    @staticmethod
    def create_text_client(
        backend_id: str,
        api_key: str | None,
        model: str | None = None,
    ) -> TextGenerationClient:
        """Create a text-generation client for a configured backend identifier."""

        info = TEXT_BACKENDS.get(backend_id)
        if info is None:
            raise UnknownBackendError(backend_id, SUPPORTED_BACKEND_IDS)
        return info.client_class(api_key=api_key, model=model)

    @staticmethod
    def create_speech_client(api_key: str | None) -> SpeechClient:
        """Create the speech-synthesis client."""

        return ElevenLabsSpeechClient(api_key=api_key)
