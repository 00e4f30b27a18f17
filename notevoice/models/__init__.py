"""Shared typed data models for Notevoice.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    AudioChunk,
    GenerationRequest,
    NoteDocument,
    RunOutcome,
    SynthesisRequest,
    VoiceSettings,
)

__all__ = [
    "AudioChunk",
    "GenerationRequest",
    "NoteDocument",
    "RunOutcome",
    "SynthesisRequest",
    "VoiceSettings",
]
