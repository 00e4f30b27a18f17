"""Command-line interface for Notevoice.

Responsibilities:
- Expose user-facing commands for note-to-audio generation and key management.
- Convert CLI arguments into `NotevoiceConfig` and execute the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_backend_list,
    echo_key_status,
    echo_outcome,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import note_path_in_vault, resolve_command_config
from .credentials import CREDENTIAL_PROVIDERS, create_credential_store
from .errors import PipelineStageError
from .io.note_parser import parse_note
from .io.storage import VaultStore
from .llm.backends import TEXT_BACKENDS
from .parsing import normalize_optional_string
from .pipeline import NotevoicePipeline
from .provider_factory import ProviderFactory
from .telemetry.logger import RunLogger
from .text.preprocessor import TextPreprocessor
from .text.word_count import count_words, estimate_minutes

app = typer.Typer(
    name="notevoice",
    no_args_is_help=True,
    help="Turn markdown notes into spoken-audio summaries.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with command defaults."),
]
VaultOption = Annotated[
    Path | None,
    typer.Option("--vault", help="Vault root directory (overrides config value)."),
]
BackendOption = Annotated[
    str | None,
    typer.Option("--backend", help="Text-generation backend id: xai, openai, anthropic, gemini."),
]


class StageProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        typer.echo(
            f"[progress] command={self._command_name} "
            f"{stage_index}/{stage_total} stage={stage_name}"
        )


@app.command("generate")
def generate_command(
    note: Annotated[Path, typer.Argument(help="Note path, relative to the vault root.")],
    vault: VaultOption = None,
    config_file: ConfigOption = None,
    backend: BackendOption = None,
    model: Annotated[
        str | None,
        typer.Option("--model", help="Model id override for the active backend."),
    ] = None,
    voice_id: Annotated[
        str | None,
        typer.Option("--voice-id", help="ElevenLabs voice id override."),
    ] = None,
    summarize: Annotated[
        bool | None,
        typer.Option(
            "--summarize/--no-summarize",
            help="Enable or disable summarization of long or categorized notes.",
        ),
    ] = None,
    threshold: Annotated[
        int | None,
        typer.Option("--threshold", min=1, help="Word count above which notes are summarized."),
    ] = None,
) -> None:
    """Generate audio for one note and embed a player in it."""

    try:
        config = resolve_command_config(
            config_file=config_file,
            vault=vault,
            backend=backend,
            model=model,
            voice_id=voice_id,
            credential_store_factory=create_credential_store,
        )
        if summarize is not None:
            config = replace(config, enable_summarization=summarize)
        if threshold is not None:
            config = replace(config, summarization_threshold=threshold)
        note_path = note_path_in_vault(note, config.vault_root)
    except Exception as exc:
        exit_with_command_error("generate", exc)

    progress = StageProgressIndicator(command_name="generate")
    pipeline = NotevoicePipeline(
        store=VaultStore(config.vault_root),
        run_logger=RunLogger(),
        stage_progress_callback=progress.on_stage_start,
    )
    outcome = pipeline.run(config, note_path)
    echo_outcome(outcome)
    if outcome.failed:
        raise typer.Exit(code=1)


@app.command("validate-keys")
def validate_keys_command(
    config_file: ConfigOption = None,
    backend: BackendOption = None,
) -> None:
    """Check the active text backend key and the ElevenLabs key against their APIs."""

    try:
        config = resolve_command_config(
            config_file=config_file,
            vault=None,
            backend=backend,
            credential_store_factory=create_credential_store,
        )
        settings = config.backend_settings()
        text_client = ProviderFactory.create_text_client(
            config.active_backend, settings.api_key, settings.model
        )
        speech_client = ProviderFactory.create_speech_client(config.speech.api_key)
    except Exception as exc:
        exit_with_command_error("validate-keys", exc)

    label = TEXT_BACKENDS[config.active_backend].label
    text_valid = text_client.validate_api_key()
    speech_valid = speech_client.validate_api_key()
    echo_key_status(f"{label} ({config.active_backend})", text_valid)
    echo_key_status("ElevenLabs", speech_valid)
    if not (text_valid and speech_valid):
        raise typer.Exit(code=1)


@app.command("voices")
def voices_command(config_file: ConfigOption = None) -> None:
    """List voices available to the configured ElevenLabs account."""

    try:
        config = resolve_command_config(
            config_file=config_file,
            vault=None,
            credential_store_factory=create_credential_store,
        )
        voices = ProviderFactory.create_speech_client(config.speech.api_key).list_voices()
    except Exception as exc:
        exit_with_command_error("voices", exc)

    if not voices:
        typer.echo("No voices available for this account.")
        return
    echo_voice_list(voices, config.speech.voice_id)


@app.command("backends")
def backends_command(
    config_file: ConfigOption = None,
    backend: BackendOption = None,
) -> None:
    """List supported text-generation backends."""

    try:
        config = resolve_command_config(
            config_file=config_file,
            vault=None,
            backend=backend,
            credential_store_factory=create_credential_store,
        )
    except Exception as exc:
        exit_with_command_error("backends", exc)

    echo_backend_list(list(TEXT_BACKENDS.values()), config.active_backend)


@app.command("preprocess")
def preprocess_command(
    file: Annotated[Path, typer.Argument(help="Markdown note file to clean.")],
) -> None:
    """Print the speech-ready text of a note body and its estimated length."""

    try:
        document = parse_note(file.read_text(encoding="utf-8"))
    except OSError as exc:
        exit_with_command_error(
            "preprocess",
            PipelineStageError(
                stage="read",
                detail=f"Failed to read `{file}`: {exc}",
                hint="Check the note path and file permissions.",
            ),
        )

    cleaned = TextPreprocessor().clean(document.body)
    word_count = count_words(cleaned)
    typer.echo(cleaned)
    typer.echo("")
    typer.echo(f"Words: {word_count} (about {estimate_minutes(word_count)} min)")


@app.command("credentials")
def credentials_command(
    provider: Annotated[
        str,
        typer.Argument(help=f"Provider account: {', '.join(CREDENTIAL_PROVIDERS)}."),
    ],
    set_api_key: Annotated[
        bool,
        typer.Option("--set", help="Prompt for API key with hidden input and store it securely."),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option("--clear", help="Clear the stored API key."),
    ] = False,
) -> None:
    """Manage securely stored provider API keys."""

    if provider not in CREDENTIAL_PROVIDERS:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail=f"Unknown provider `{provider}`.",
                hint=f"Use one of: {', '.join(CREDENTIAL_PROVIDERS)}.",
            ),
        )
    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail="`--set` and `--clear` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                f"{provider} API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set`.",
                ),
            )
        try:
            credential_store.set_api_key(provider, prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo(f"{provider} API key stored in secure credential storage.")
        return

    if clear_api_key:
        if credential_store.clear_api_key(provider):
            typer.echo(f"Stored {provider} API key cleared from secure credential storage.")
        else:
            typer.echo(f"No stored {provider} API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    status = "present" if credential_store.get_api_key(provider) is not None else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored {provider} API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
