"""Text-generation client interface.

Responsibilities:
- Define the capability shared by every text-generation backend.
- Provide the common key-validation behavior for HTTP-backed variants.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from .http_client import ProviderHttpClient

DEFAULT_TEMPERATURE = 0.3


class TextGenerationClient(Protocol):
    """Protocol for text-generation backends."""

    provider_id: str
    model: str

    def generate_text(
        self,
        user_instruction: str,
        system_instruction: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return generated text for a system/user instruction pair."""

    def validate_api_key(self) -> bool:
        """Return whether the configured API key is accepted; never raises."""


class HttpTextGenerationClient(ProviderHttpClient):
    """Base class for HTTP text-generation backends.

    Subclasses set the class attributes and implement `generate_text`.
    """

    provider_id = ""
    default_base_url = ""
    default_model = ""

    def __init__(
        self,
        api_key: str | None,
        model: str | None = None,
        *,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize backend settings, falling back to the variant default model."""

        super().__init__(
            api_key=api_key,
            base_url=base_url or self.default_base_url,
            timeout_seconds=timeout_seconds,
        )
        self.model = (model or "").strip() or self.default_model

    def generate_text(
        self,
        user_instruction: str,
        system_instruction: str,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return generated text for a system/user instruction pair."""

        raise NotImplementedError

    def validate_api_key(self) -> bool:
        """Probe the backend with the configured key and report acceptance."""

        try:
            self._require_api_key()
            self._probe_api_key()
        except Exception as exc:
            logger.debug(
                "{} API key validation failed: {}", self.provider_label, type(exc).__name__
            )
            return False
        return True

    def _probe_api_key(self) -> None:
        """Issue the cheapest authenticated request the backend offers."""

        self._get_json("/models")
