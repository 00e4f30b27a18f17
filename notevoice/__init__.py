"""Top-level package for Notevoice.

This package turns markdown notes into spoken-audio artifacts: it optionally
summarizes the note through a pluggable text-generation backend, cleans the
text for speech, synthesizes it with ElevenLabs, and writes an audio player
back into the note. The main orchestration entry point is `NotevoicePipeline`.
"""

from .pipeline import NotevoicePipeline

__all__ = ["NotevoicePipeline", "__version__"]

__version__ = "0.1.0"
