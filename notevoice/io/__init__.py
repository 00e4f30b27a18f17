"""Input/output components for Notevoice.

This package contains note parsing/mutation and the vault storage interface
used by the pipeline.
"""

from .note_parser import build_audio_section, parse_note, with_audio_metadata
from .storage import NoteStore, VaultStore

__all__ = [
    "NoteStore",
    "VaultStore",
    "build_audio_section",
    "parse_note",
    "with_audio_metadata",
]
