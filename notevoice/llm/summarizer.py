"""Spoken-summary generation through the active text-generation backend.

Responsibilities:
- Combine category prompts with a backend client to shorten long notes.
- Keep backend construction behind the provider factory.
"""

from __future__ import annotations

from typing import Callable

from ..models.datatypes import GenerationRequest
from ..provider_factory import ProviderFactory
from .base import DEFAULT_TEMPERATURE, TextGenerationClient
from .prompts import DEFAULT_CATEGORY, PromptBuilder

ClientFactory = Callable[[str, str, str], TextGenerationClient]


class NoteSummarizer:
    """Summarize note bodies for audio listening."""

    def __init__(
        self,
        client_factory: ClientFactory = ProviderFactory.create_text_client,
        prompts: PromptBuilder | None = None,
    ) -> None:
        """Initialize the client factory and prompt builder."""

        self.client_factory = client_factory
        self.prompts = prompts if prompts is not None else PromptBuilder()

    def build_request(
        self,
        content: str,
        category: str | None,
        *,
        backend_id: str,
        api_key: str,
        model_name: str,
    ) -> GenerationRequest:
        """Return the generation request for one note body."""

        prompt = self.prompts.build(content, category or DEFAULT_CATEGORY)
        return GenerationRequest(
            backend_id=backend_id,
            api_key=api_key,
            model_name=model_name,
            system_instruction=prompt.system_instruction,
            user_instruction=prompt.user_instruction,
            temperature=DEFAULT_TEMPERATURE,
        )

    def summarize(
        self,
        content: str,
        category: str | None,
        *,
        backend_id: str,
        api_key: str,
        model_name: str,
    ) -> str:
        """Return a spoken-friendly summary of `content`."""

        request = self.build_request(
            content,
            category,
            backend_id=backend_id,
            api_key=api_key,
            model_name=model_name,
        )
        client = self.client_factory(request.backend_id, request.api_key, request.model_name)
        return client.generate_text(
            request.user_instruction,
            request.system_instruction,
            request.temperature,
        )
