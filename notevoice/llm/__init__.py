"""LLM-facing abstractions for note summarization.

This package defines the text-generation client interface, its backend
variants, and the summarization prompt library.
"""

from .anthropic_client import AnthropicTextClient
from .backends import SUPPORTED_BACKEND_IDS, TEXT_BACKENDS, BackendInfo
from .base import HttpTextGenerationClient, TextGenerationClient
from .gemini_client import GeminiTextClient
from .openai_client import OpenAITextClient, XAITextClient
from .prompts import PromptBuilder, SummaryPrompt

__all__ = [
    "AnthropicTextClient",
    "BackendInfo",
    "GeminiTextClient",
    "HttpTextGenerationClient",
    "OpenAITextClient",
    "PromptBuilder",
    "SUPPORTED_BACKEND_IDS",
    "SummaryPrompt",
    "TEXT_BACKENDS",
    "TextGenerationClient",
    "XAITextClient",
]
