"""CLI runtime resolution helpers.

This module isolates config loading, runtime source assembly, and vault path
handling from the command wiring layer.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Callable, Mapping, Protocol

from .config import ConfigLoader, NotevoiceConfig, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import PipelineStageError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for the credential store operations used by runtime resolution."""

    def load_runtime_secrets(self) -> dict[str, str]:
        """Return stored API keys keyed by runtime-source key."""


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: str | None,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def load_base_config(
    config_file: Path | None,
    vault: Path | None,
    env: Mapping[str, str] | None = None,
) -> NotevoiceConfig:
    """Load YAML (or environment) settings and apply the `--vault` override."""

    if config_file is None:
        try:
            config = ConfigLoader.from_env(os.environ if env is None else env)
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix the NOTEVOICE_* environment variables and rerun.",
            ) from exc
    else:
        try:
            config = ConfigLoader.from_yaml(config_file)
        except FileNotFoundError as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Config file not found: `{config_file}`.",
                hint="Provide an existing path via `--config <path.yaml>`.",
            ) from exc
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Invalid config file `{config_file}`: {exc}",
                hint="Fix config schema/values and rerun.",
            ) from exc

    if vault is not None:
        config = replace(config, vault_root=vault)
    return config


def resolve_runtime_sources(
    backend: str | None,
    model: str | None,
    voice_id: str | None,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
    env: Mapping[str, str] | None = None,
) -> RuntimeConfigSources:
    """Build runtime sources from CLI options, secure storage, and the environment."""

    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "active_backend", backend)
    _set_runtime_cli_value(runtime_cli_values, "model", model)
    _set_runtime_cli_value(runtime_cli_values, "voice_id", voice_id)

    runtime_secure_values = credential_store_factory().load_runtime_secrets()
    return RuntimeConfigSources(
        cli=runtime_cli_values,
        secure=runtime_secure_values,
        env=dict(os.environ if env is None else env),
    )


def resolve_command_config(
    config_file: Path | None,
    vault: Path | None,
    backend: str | None = None,
    model: str | None = None,
    voice_id: str | None = None,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> NotevoiceConfig:
    """Return the fully resolved configuration for one command invocation."""

    base_config = load_base_config(config_file, vault)
    sources = resolve_runtime_sources(
        backend=backend,
        model=model,
        voice_id=voice_id,
        credential_store_factory=credential_store_factory,
    )
    try:
        return base_config.with_runtime_sources(sources)
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=str(exc),
            hint="Check `--backend`, NOTEVOICE_ACTIVE_BACKEND, or `active_backend` in config.",
        ) from exc


def note_path_in_vault(note: Path, vault_root: Path) -> str:
    """Return `note` as a vault-relative POSIX path.

    Relative paths are taken as already vault-relative; absolute paths must
    point inside the vault.
    """

    if not note.is_absolute():
        return note.as_posix()
    try:
        return note.resolve().relative_to(vault_root.resolve()).as_posix()
    except ValueError as exc:
        raise PipelineStageError(
            stage="read",
            detail=f"Note `{note}` is outside the vault `{vault_root}`.",
            hint="Pass a vault-relative note path or set `--vault` to the containing vault.",
        ) from exc
