"""Text-to-speech provider abstractions.

This package contains the ElevenLabs client, voice descriptors, and the
chunked synthesizer used by the pipeline synthesis stage.
"""

from .elevenlabs_client import ElevenLabsSpeechClient, SpeechClient
from .synthesizer import MAX_CHUNK_CHARS, SpeechSynthesizer
from .voices import VoiceProfile

__all__ = [
    "ElevenLabsSpeechClient",
    "MAX_CHUNK_CHARS",
    "SpeechClient",
    "SpeechSynthesizer",
    "VoiceProfile",
]
