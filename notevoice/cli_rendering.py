"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
run outcomes, key validation rows, and voice/backend listings.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .llm.backends import BackendInfo
from .models.datatypes import RunOutcome
from .tts.voices import VoiceProfile

_OUTCOME_COLORS = {
    "done": typer.colors.GREEN,
    "skipped": typer.colors.YELLOW,
    "too_short": typer.colors.YELLOW,
}


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_outcome(outcome: RunOutcome) -> None:
    """Print the outcome message; failed runs go to stderr with their stage."""

    if outcome.failed:
        stage = outcome.stage or "run"
        typer.secho(
            f"generate failed at stage `{stage}`: {outcome.message}",
            fg=typer.colors.RED,
            err=True,
        )
        return

    typer.secho(outcome.message, fg=_OUTCOME_COLORS.get(outcome.status))
    if outcome.word_count is not None:
        source = "summary" if outcome.summarized else "note body"
        typer.echo(f"Spoken words: {outcome.word_count} ({source})")


def echo_key_status(label: str, valid: bool) -> None:
    """Print one key validation row."""

    status = "valid" if valid else "invalid"
    color = typer.colors.GREEN if valid else typer.colors.RED
    typer.secho(f"{label}: {status}", fg=color)


def echo_voice_list(voices: list[VoiceProfile], selected_voice_id: str) -> None:
    """Print compact `voice_id  name` rows, marking the configured voice."""

    for voice in voices:
        marker = "*" if voice.voice_id == selected_voice_id else " "
        category = f" [{voice.category}]" if voice.category else ""
        typer.echo(f"{marker} {voice.voice_id}  {voice.name}{category}")


def echo_backend_list(backends: list[BackendInfo], active_backend: str) -> None:
    """Print supported text backends with their default and suggested models."""

    for info in backends:
        marker = "*" if info.backend_id == active_backend else " "
        typer.echo(f"{marker} {info.backend_id}  {info.label}  default={info.default_model}")
        typer.echo(f"    models: {', '.join(info.suggested_models)}")
        typer.echo(f"    key: {info.key_placeholder}  ({info.docs_url})")
