"""Registry of supported text-generation backends.

Responsibilities:
- Map each backend identifier to its client class and display metadata.
- Serve as the single place where new backends are registered.
"""

from __future__ import annotations

from dataclasses import dataclass

from .anthropic_client import AnthropicTextClient
from .base import HttpTextGenerationClient
from .gemini_client import GeminiTextClient
from .openai_client import OpenAITextClient, XAITextClient


@dataclass(frozen=True, slots=True)
class BackendInfo:
    """Declarative description of one text-generation backend.

    Attributes:
        backend_id: Discriminator used in configuration.
        label: Human-readable provider name.
        client_class: Client implementation constructed by the factory.
        suggested_models: Model identifiers offered in help output.
        key_placeholder: Example prefix of a valid API key.
        docs_url: Where to create an API key.
    """

    backend_id: str
    label: str
    client_class: type[HttpTextGenerationClient]
    suggested_models: tuple[str, ...]
    key_placeholder: str
    docs_url: str

    @property
    def default_model(self) -> str:
        """Return the model used when configuration leaves it blank."""

        return self.client_class.default_model


TEXT_BACKENDS: dict[str, BackendInfo] = {
    info.backend_id: info
    for info in (
        BackendInfo(
            backend_id="xai",
            label="xAI (Grok)",
            client_class=XAITextClient,
            suggested_models=(
                "grok-4-1-fast-reasoning",
                "grok-4-1-fast",
                "grok-3-mini-fast-reasoning",
            ),
            key_placeholder="xai-...",
            docs_url="https://console.x.ai",
        ),
        BackendInfo(
            backend_id="openai",
            label="OpenAI",
            client_class=OpenAITextClient,
            suggested_models=("gpt-4o", "gpt-4o-mini", "gpt-4-turbo"),
            key_placeholder="sk-...",
            docs_url="https://platform.openai.com/api-keys",
        ),
        BackendInfo(
            backend_id="anthropic",
            label="Anthropic (Claude)",
            client_class=AnthropicTextClient,
            suggested_models=(
                "claude-sonnet-4-5-20250929",
                "claude-3-5-sonnet-20241022",
                "claude-3-haiku-20240307",
            ),
            key_placeholder="sk-ant-...",
            docs_url="https://console.anthropic.com/settings/keys",
        ),
        BackendInfo(
            backend_id="gemini",
            label="Google Gemini",
            client_class=GeminiTextClient,
            suggested_models=("gemini-2.5-flash", "gemini-2.0-flash-exp", "gemini-1.5-pro"),
            key_placeholder="AIza...",
            docs_url="https://aistudio.google.com/app/apikey",
        ),
    )
}

SUPPORTED_BACKEND_IDS: tuple[str, ...] = tuple(TEXT_BACKENDS)
