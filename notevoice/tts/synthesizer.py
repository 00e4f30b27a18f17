"""Chunked speech synthesis.

Responsibilities:
- Split long text into provider-sized chunks at sentence boundaries.
- Synthesize chunks sequentially and merge them in order.
"""

from __future__ import annotations

from ..audio.merger import AudioMerger
from ..models.datatypes import AudioChunk, SynthesisRequest, VoiceSettings
from ..text.chunking import plan_speech_chunks
from .elevenlabs_client import SpeechClient
from .voices import DEFAULT_OUTPUT_FORMAT, DEFAULT_SPEECH_MODEL, DEFAULT_VOICE_ID

MAX_CHUNK_CHARS = 4500


class SpeechSynthesizer:
    """Turn arbitrarily long text into one audio stream."""

    def __init__(
        self,
        client: SpeechClient,
        voice_id: str = DEFAULT_VOICE_ID,
        model: str = DEFAULT_SPEECH_MODEL,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        max_chunk_chars: int = MAX_CHUNK_CHARS,
        merger: AudioMerger | None = None,
    ) -> None:
        """Initialize synthesis settings."""

        if max_chunk_chars <= 0:
            raise ValueError("`max_chunk_chars` must be a positive integer.")
        self.client = client
        self.voice_id = voice_id
        self.model = model
        self.output_format = output_format
        self.max_chunk_chars = max_chunk_chars
        self.merger = merger if merger is not None else AudioMerger()

    def plan_chunks(self, text: str) -> list[str]:
        """Return the ordered chunk texts that `synthesize` would send."""

        if len(text) <= self.max_chunk_chars:
            return [text]
        return plan_speech_chunks(text, self.max_chunk_chars)

    def synthesize(self, text: str, voice_settings: VoiceSettings | None = None) -> bytes:
        """Return merged audio for `text`.

        Chunks are sent one at a time; the first failing chunk aborts the
        whole call and its error propagates unchanged.
        """

        settings = voice_settings if voice_settings is not None else VoiceSettings()
        chunks: list[AudioChunk] = []
        for index, chunk_text in enumerate(self.plan_chunks(text)):
            audio = self.client.synthesize_speech(self._request(chunk_text, settings))
            chunks.append(AudioChunk(index=index, text=chunk_text, audio=audio))
        return self.merger.merge(chunks)

    def _request(self, text: str, settings: VoiceSettings) -> SynthesisRequest:
        return SynthesisRequest(
            api_key=self.client.api_key,
            voice_id=self.voice_id,
            model_name=self.model,
            output_format=self.output_format,
            text=text,
            voice_settings=settings,
        )
