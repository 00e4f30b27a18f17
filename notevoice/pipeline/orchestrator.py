"""Pipeline orchestration for Notevoice.

Responsibilities:
- Define the stage order for turning one note into an audio artifact.
- Convert every terminal state into exactly one `RunOutcome`.

Key types:
- `NotevoicePipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import PurePosixPath

from loguru import logger

from ..config import NotevoiceConfig
from ..errors import NotevoiceError, ValidationError
from ..io.note_parser import parse_note, with_audio_metadata
from ..io.storage import NoteStore
from ..llm.summarizer import NoteSummarizer
from ..models.datatypes import NoteDocument, RunOutcome
from ..parsing import normalize_optional_string
from ..provider_factory import ProviderFactory
from ..telemetry.logger import RunLogger
from ..text.preprocessor import TextPreprocessor
from ..text.word_count import count_words
from ..tts.synthesizer import SpeechSynthesizer
from .telemetry import PipelineTelemetryMixin

SUMMARY_CATEGORIES = frozenset({"가이드", "리소스", "유튜브학습노트", "회고"})
MIN_SPEECH_CHARS = 50

_AUDIO_EXTENSIONS = frozenset({"mp3", "opus", "pcm", "wav"})


def audio_extension(output_format: str) -> str:
    """Return the artifact extension for an ElevenLabs output format id."""

    prefix = output_format.split("_", 1)[0].strip().lower()
    return prefix if prefix in _AUDIO_EXTENSIONS else "mp3"


def audio_path_for(note_path: PurePosixPath, audio_dir: str, output_format: str) -> str:
    """Return the vault-relative artifact path for a note."""

    return f"{audio_dir.strip('/')}/{note_path.stem}.{audio_extension(output_format)}"


def should_summarize(document: NoteDocument, config: NotevoiceConfig) -> bool:
    """Return whether the note body is summarized before synthesis."""

    if not config.enable_summarization:
        return False
    if count_words(document.body) > config.summarization_threshold:
        return True
    return document.metadata_string("type") in SUMMARY_CATEGORIES


class NotevoicePipeline(PipelineTelemetryMixin):
    """Coordinate all stages for a single note-to-audio run."""

    def __init__(
        self,
        store: NoteStore,
        run_logger: RunLogger | None = None,
        provider_factory: type[ProviderFactory] = ProviderFactory,
        clock: Callable[[], datetime] | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
        preprocessor: TextPreprocessor | None = None,
    ) -> None:
        """Initialize collaborators and optional runtime logging hooks."""

        self._store = store
        self._run_logger = run_logger
        self._provider_factory = provider_factory
        self._clock = clock
        self._stage_progress_callback = stage_progress_callback
        self._preprocessor = preprocessor if preprocessor is not None else TextPreprocessor()
        self._current_stage = None

    def run(self, config: NotevoiceConfig, note_path: str | PurePosixPath) -> RunOutcome:
        """Run the pipeline for one note and return its outcome.

        Configuration, credential, provider, and storage failures become a
        `failed` outcome carrying the originating exception and stage.
        """

        path = PurePosixPath(note_path)
        self._current_stage = None
        try:
            outcome = self._execute(config, path)
        except (NotevoiceError, OSError, ValueError) as exc:
            outcome = RunOutcome(
                status="failed",
                message=f"Error: {exc}",
                note_path=path,
                stage=self._current_stage,
                error=exc,
            )
        if self._run_logger is not None:
            self._run_logger.log_outcome(
                outcome.status, outcome.stage, summarized=outcome.summarized
            )
        return outcome

    def _execute(self, config: NotevoiceConfig, path: PurePosixPath) -> RunOutcome:
        self._run_stage("validate", lambda: self._validate(config))

        document = self._run_stage("read", lambda: parse_note(self._store.read(str(path))))

        existing_audio = self._run_stage(
            "existing-audio", lambda: self._existing_audio(document)
        )
        if existing_audio is not None:
            return RunOutcome(
                status="skipped",
                message="Audio already exists for this note. Skipping generation.",
                note_path=path,
                stage="existing-audio",
                audio_path=existing_audio,
            )

        summarize = self._run_stage("decide", lambda: should_summarize(document, config))
        speech_text = document.body
        if summarize:
            speech_text = self._run_stage(
                "summarize", lambda: self._summarize(config, document)
            )

        cleaned = self._run_stage("preprocess", lambda: self._preprocessor.clean(speech_text))
        if len(cleaned) < MIN_SPEECH_CHARS:
            return RunOutcome(
                status="too_short",
                message="Note content is too short to generate audio.",
                note_path=path,
                stage="preprocess",
                summarized=summarize,
            )

        audio_path = self._run_stage(
            "synthesize", lambda: self._synthesize(config, path, cleaned)
        )

        word_count = count_words(cleaned)
        self._run_stage(
            "persist", lambda: self._persist(path, document, audio_path, word_count)
        )
        return RunOutcome(
            status="done",
            message=f"Audio generated successfully: {audio_path}",
            note_path=path,
            audio_path=audio_path,
            word_count=word_count,
            summarized=summarize,
        )

    def _validate(self, config: NotevoiceConfig) -> None:
        """Require the active backend and speech keys before any I/O."""

        config.validate()
        if normalize_optional_string(config.backend_settings().api_key) is None:
            raise ValidationError(
                f"Missing API key for the active text backend `{config.active_backend}`. "
                "Please configure API keys before generating audio."
            )
        if normalize_optional_string(config.speech.api_key) is None:
            raise ValidationError(
                "Missing ElevenLabs API key. Please configure API keys before generating audio."
            )

    def _existing_audio(self, document: NoteDocument) -> str | None:
        """Return the recorded artifact path when it still exists in the store.

        A value the store cannot resolve counts as no recorded artifact.
        """

        audio_file = document.metadata_string("audio_file")
        if audio_file is None:
            return None
        try:
            found = self._store.exists(audio_file)
        except ValueError:
            logger.warning("Ignoring unresolvable audio_file `{}`", audio_file)
            return None
        return audio_file if found else None

    def _summarize(self, config: NotevoiceConfig, document: NoteDocument) -> str:
        settings = config.backend_settings()
        summarizer = NoteSummarizer(client_factory=self._provider_factory.create_text_client)
        return summarizer.summarize(
            document.body,
            document.metadata_string("type"),
            backend_id=config.active_backend,
            api_key=settings.api_key or "",
            model_name=settings.model or "",
        )

    def _synthesize(self, config: NotevoiceConfig, path: PurePosixPath, text: str) -> str:
        """Synthesize `text` and write the artifact; return its vault path."""

        synthesizer = SpeechSynthesizer(
            client=self._provider_factory.create_speech_client(config.speech.api_key),
            voice_id=config.speech.voice_id,
            model=config.speech.model,
            output_format=config.speech.output_format,
            max_chunk_chars=config.max_chunk_chars,
        )
        audio = synthesizer.synthesize(text)

        audio_path = audio_path_for(path, config.audio_dir, config.speech.output_format)
        if self._store.exists(audio_path):
            self._store.delete(audio_path)
        self._store.write_bytes(audio_path, audio)
        return audio_path

    def _persist(
        self,
        path: PurePosixPath,
        document: NoteDocument,
        audio_path: str,
        word_count: int,
    ) -> None:
        now = self._clock() if self._clock is not None else None
        updated = with_audio_metadata(document, audio_path, word_count, now=now)
        self._store.replace(str(path), updated)
