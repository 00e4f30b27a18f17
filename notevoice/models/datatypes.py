"""Core datatypes shared across Notevoice modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Provide explicit typing for provider requests and run outcomes.

Key types:
- `NoteDocument`, `GenerationRequest`, `VoiceSettings`, `SynthesisRequest`,
  `AudioChunk`, and `RunOutcome`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import PurePosixPath
from typing import Union

MetadataValue = Union[str, list[str]]


@dataclass(frozen=True, slots=True)
class NoteDocument:
    """A note split into its metadata block and body.

    Attributes:
        raw_content: Verbatim note text as read from storage.
        metadata: Parsed front-matter fields; empty when absent or unparseable.
        body: Note text after the metadata block, or the full text without one.
    """

    raw_content: str
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    body: str = ""

    @property
    def has_metadata_block(self) -> bool:
        """Return whether the body was split from a leading metadata block."""

        return self.body != self.raw_content

    def metadata_string(self, key: str) -> str | None:
        """Return a scalar metadata value, or `None` when missing, blank, or a list."""

        value = self.metadata.get(key)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """One text-generation call against the active backend."""

    backend_id: str
    api_key: str
    model_name: str
    system_instruction: str
    user_instruction: str
    temperature: float = 0.3


@dataclass(frozen=True, slots=True)
class VoiceSettings:
    """ElevenLabs voice tuning parameters.

    Attributes:
        stability: Lower values give a more expressive, less stable delivery.
        similarity_boost: How closely output should match the reference voice.
        style: Style exaggeration strength.
        use_speaker_boost: Whether to boost similarity to the original speaker.
    """

    stability: float = 0.5
    similarity_boost: float = 0.75
    style: float = 0.0
    use_speaker_boost: bool = True

    def as_payload(self) -> dict[str, float | bool]:
        """Return the JSON payload shape expected by the speech API."""

        return asdict(self)


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    """One speech-synthesis call. `text` length is not bounded at this layer."""

    api_key: str
    voice_id: str
    model_name: str
    output_format: str
    text: str
    voice_settings: VoiceSettings = field(default_factory=VoiceSettings)


@dataclass(frozen=True, slots=True)
class AudioChunk:
    """Synthesized audio for one ordered text chunk."""

    index: int
    text: str
    audio: bytes


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Terminal result of one pipeline run.

    Attributes:
        status: One of `done`, `skipped`, `too_short`, or `failed`.
        message: The single human-readable status message for the run.
        note_path: Note path relative to the store root.
        stage: Stage where a `failed` or early-stopped run ended.
        audio_path: Artifact path written (or found) for the note.
        word_count: Estimated spoken word count of the synthesized text.
        summarized: Whether the synthesized text came from a summary.
        error: Originating exception for `failed` runs.
    """

    status: str
    message: str
    note_path: PurePosixPath
    stage: str | None = None
    audio_path: str | None = None
    word_count: int | None = None
    summarized: bool = False
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        """Return whether the run ended in a failure."""

        return self.status == "failed"
