"""Configuration model and loaders for Notevoice.

Responsibilities:
- Define runtime configuration as typed dataclasses.
- Provide deterministic precedence resolution for API keys, backend, and voice.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `NotevoiceConfig`: normalized settings for a pipeline run.
- `TextBackendSettings`: per-backend API key and model.
- `SpeechSettings`: ElevenLabs key, voice, model, and output format.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `NotevoiceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path, PurePosixPath
from typing import Any, Mapping

import yaml

from .errors import UnknownBackendError
from .llm.backends import SUPPORTED_BACKEND_IDS
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_int,
    parse_required_boolean,
)
from .tts.synthesizer import MAX_CHUNK_CHARS
from .tts.voices import DEFAULT_OUTPUT_FORMAT, DEFAULT_SPEECH_MODEL, DEFAULT_VOICE_ID


DEFAULT_ACTIVE_BACKEND = "xai"
DEFAULT_AUDIO_DIR = "Audio"
DEFAULT_SUMMARIZATION_THRESHOLD = 2000

ACTIVE_BACKEND_ENV_KEY = "NOTEVOICE_ACTIVE_BACKEND"
VOICE_ID_ENV_KEY = "NOTEVOICE_VOICE_ID"
SPEECH_API_KEY_ENV_KEY = "ELEVENLABS_API_KEY"
BACKEND_API_KEY_ENV_KEYS: dict[str, str] = {
    "xai": "XAI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TextBackendSettings:
    """Credentials and model for one text-generation backend.

    A blank `model` means the backend's default model.
    """

    api_key: str | None = None
    model: str | None = None


@dataclass(frozen=True, slots=True)
class SpeechSettings:
    """ElevenLabs credentials and voice selection."""

    api_key: str | None = None
    voice_id: str = DEFAULT_VOICE_ID
    model: str = DEFAULT_SPEECH_MODEL
    output_format: str = DEFAULT_OUTPUT_FORMAT


@dataclass(slots=True)
class NotevoiceConfig:
    """Runtime configuration for one pipeline run.

    Attributes:
        vault_root: Root directory that note and artifact paths are relative to.
        audio_dir: Vault-relative folder receiving audio artifacts.
        active_backend: Identifier of the text-generation backend used for summaries.
        backends: Per-backend settings keyed by backend identifier.
        speech: Speech synthesis settings.
        enable_summarization: Whether long or categorized notes are summarized.
        summarization_threshold: Word count above which a note is summarized.
        max_chunk_chars: Upper bound on characters per synthesis request.
        runtime_sources: Optional runtime source overrides injected by the CLI.
    """

    vault_root: Path
    audio_dir: str = DEFAULT_AUDIO_DIR
    active_backend: str = DEFAULT_ACTIVE_BACKEND
    backends: dict[str, TextBackendSettings] = field(default_factory=dict)
    speech: SpeechSettings = field(default_factory=SpeechSettings)
    enable_summarization: bool = True
    summarization_threshold: int = DEFAULT_SUMMARIZATION_THRESHOLD
    max_chunk_chars: int = MAX_CHUNK_CHARS
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before pipeline execution."""

        if self.active_backend not in SUPPORTED_BACKEND_IDS:
            raise UnknownBackendError(self.active_backend, SUPPORTED_BACKEND_IDS)
        unknown = sorted(set(self.backends).difference(SUPPORTED_BACKEND_IDS))
        if unknown:
            raise UnknownBackendError(unknown[0], SUPPORTED_BACKEND_IDS)
        if self.summarization_threshold <= 0:
            raise ValueError("`summarization_threshold` must be a positive integer.")
        if self.max_chunk_chars <= 0:
            raise ValueError("`max_chunk_chars` must be a positive integer.")
        self._require_non_empty(self.speech.voice_id, "speech.voice_id")
        self._require_non_empty(self.speech.model, "speech.model")
        self._require_non_empty(self.speech.output_format, "speech.output_format")
        self._require_relative_folder(self.audio_dir, "audio_dir")

    def backend_settings(self, backend_id: str | None = None) -> TextBackendSettings:
        """Return settings for `backend_id` (default: the active backend)."""

        return self.backends.get(backend_id or self.active_backend, TextBackendSettings())

    def with_runtime_sources(self, sources: RuntimeConfigSources | None = None) -> NotevoiceConfig:
        """Return a copy with keys, backend, and voice resolved from runtime sources.

        Precedence for each key is:
        `cli` > `secure` > `env` > config file value or default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        active_backend = self._resolve_runtime_value(
            key="active_backend",
            env_key=ACTIVE_BACKEND_ENV_KEY,
            default_value=self.active_backend,
            sources=resolved_sources,
        )

        backends: dict[str, TextBackendSettings] = {}
        for backend_id in SUPPORTED_BACKEND_IDS:
            current = self.backend_settings(backend_id)
            model = self._resolve_runtime_value(
                key=f"{backend_id}_model",
                env_key=None,
                default_value=current.model,
                sources=resolved_sources,
            )
            if backend_id == active_backend:
                # A bare `model` CLI value targets whichever backend is active.
                model = _normalized_lookup(resolved_sources.cli, "model") or model
            backends[backend_id] = TextBackendSettings(
                api_key=self._resolve_runtime_value(
                    key=f"{backend_id}_api_key",
                    env_key=BACKEND_API_KEY_ENV_KEYS[backend_id],
                    default_value=current.api_key,
                    sources=resolved_sources,
                ),
                model=model,
            )

        speech = replace(
            self.speech,
            api_key=self._resolve_runtime_value(
                key="elevenlabs_api_key",
                env_key=SPEECH_API_KEY_ENV_KEY,
                default_value=self.speech.api_key,
                sources=resolved_sources,
            ),
            voice_id=self._resolve_runtime_value(
                key="voice_id",
                env_key=VOICE_ID_ENV_KEY,
                default_value=self.speech.voice_id,
                sources=resolved_sources,
            )
            or DEFAULT_VOICE_ID,
        )

        resolved = replace(
            self,
            active_backend=active_backend or DEFAULT_ACTIVE_BACKEND,
            backends=backends,
            speech=speech,
            runtime_sources=resolved_sources,
        )
        resolved.validate()
        return resolved

    @staticmethod
    def _resolve_runtime_value(
        key: str,
        env_key: str | None,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in deterministic order."""

        cli_value = _normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = _normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        if env_key is not None:
            env_value = _normalized_lookup(sources.env, env_key)
            if env_value is not None:
                return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")

    @staticmethod
    def _require_relative_folder(value: str, field_name: str) -> None:
        """Validate that a folder stays inside the vault."""

        NotevoiceConfig._require_non_empty(value, field_name)
        folder = PurePosixPath(value)
        if folder.is_absolute() or ".." in folder.parts:
            raise ValueError(f"`{field_name}` must be a vault-relative folder, got `{value}`.")


def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
    """Return a stripped mapping value for a key or `None` when missing/blank."""

    if key not in mapping:
        return None
    return normalize_optional_string(mapping.get(key))


class ConfigLoader:
    """Factory methods for creating `NotevoiceConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"vault_root"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "vault_root",
            "audio_dir",
            "active_backend",
            "backends",
            "speech",
            "enable_summarization",
            "summarization_threshold",
            "max_chunk_chars",
        }
    )
    _SUPPORTED_BACKEND_KEYS = frozenset({"api_key", "model"})
    _SUPPORTED_SPEECH_KEYS = frozenset({"api_key", "voice_id", "model", "output_format"})
    _RUNTIME_ENV_KEYS = frozenset(
        {ACTIVE_BACKEND_ENV_KEY, VOICE_ID_ENV_KEY, SPEECH_API_KEY_ENV_KEY}
        | set(BACKEND_API_KEY_ENV_KEYS.values())
    )

    @staticmethod
    def from_yaml(path: Path) -> NotevoiceConfig:
        """Create a validated config from a YAML file."""

        payload = ConfigLoader._parse_yaml_payload(path.read_text(encoding="utf-8"), path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> NotevoiceConfig:
        """Create a validated config from environment variables.

        API keys, the active backend, and the voice id are kept as runtime
        sources so they resolve with the usual precedence.
        """

        env_map: Mapping[str, str] = os.environ if env is None else env

        vault_root = Path(_normalized_lookup(env_map, "NOTEVOICE_VAULT_ROOT") or ".")
        audio_dir = _normalized_lookup(env_map, "NOTEVOICE_AUDIO_DIR") or DEFAULT_AUDIO_DIR
        enable_summarization = ConfigLoader._optional_env_boolean(
            env_map, "NOTEVOICE_ENABLE_SUMMARIZATION"
        )
        threshold_raw = _normalized_lookup(env_map, "NOTEVOICE_SUMMARIZATION_THRESHOLD")
        threshold = (
            parse_positive_int(threshold_raw, "NOTEVOICE_SUMMARIZATION_THRESHOLD")
            if threshold_raw is not None
            else DEFAULT_SUMMARIZATION_THRESHOLD
        )

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

        config = NotevoiceConfig(
            vault_root=vault_root,
            audio_dir=audio_dir,
            enable_summarization=True if enable_summarization is None else enable_summarization,
            summarization_threshold=threshold,
            runtime_sources=RuntimeConfigSources(env=runtime_env),
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> NotevoiceConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_keys(
            payload, ConfigLoader._SUPPORTED_YAML_KEYS, source_label, ConfigLoader._REQUIRED_YAML_KEYS
        )

        vault_root = _normalized_lookup(payload, "vault_root")
        if vault_root is None:
            raise ValueError(f"{source_label} requires non-empty `vault_root`.")

        config = NotevoiceConfig(
            vault_root=Path(vault_root).expanduser(),
            audio_dir=_normalized_lookup(payload, "audio_dir") or DEFAULT_AUDIO_DIR,
            active_backend=_normalized_lookup(payload, "active_backend") or DEFAULT_ACTIVE_BACKEND,
            backends=ConfigLoader._backends_from_mapping(payload, source_label),
            speech=ConfigLoader._speech_from_mapping(payload, source_label),
            enable_summarization=ConfigLoader._optional_boolean(
                payload, "enable_summarization", source_label, default=True
            ),
            summarization_threshold=ConfigLoader._optional_positive_int(
                payload, "summarization_threshold", source_label, DEFAULT_SUMMARIZATION_THRESHOLD
            ),
            max_chunk_chars=ConfigLoader._optional_positive_int(
                payload, "max_chunk_chars", source_label, MAX_CHUNK_CHARS
            ),
        )
        config.validate()
        return config

    @staticmethod
    def _backends_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> dict[str, TextBackendSettings]:
        """Read the `backends` section keyed by backend identifier."""

        section = ConfigLoader._optional_mapping(payload, "backends", source_label)
        backends: dict[str, TextBackendSettings] = {}
        for raw_backend_id, raw_settings in section.items():
            backend_id = normalize_optional_string(raw_backend_id)
            if backend_id not in SUPPORTED_BACKEND_IDS:
                raise UnknownBackendError(str(raw_backend_id), SUPPORTED_BACKEND_IDS)
            label = f"{source_label} backend `{backend_id}`"
            settings = ConfigLoader._require_mapping(raw_settings, label)
            ConfigLoader._validate_keys(settings, ConfigLoader._SUPPORTED_BACKEND_KEYS, label)
            backends[backend_id] = TextBackendSettings(
                api_key=_normalized_lookup(settings, "api_key"),
                model=_normalized_lookup(settings, "model"),
            )
        return backends

    @staticmethod
    def _speech_from_mapping(payload: Mapping[str, Any], source_label: str) -> SpeechSettings:
        """Read the `speech` section."""

        section = ConfigLoader._optional_mapping(payload, "speech", source_label)
        label = f"{source_label} section `speech`"
        ConfigLoader._validate_keys(section, ConfigLoader._SUPPORTED_SPEECH_KEYS, label)
        return SpeechSettings(
            api_key=_normalized_lookup(section, "api_key"),
            voice_id=_normalized_lookup(section, "voice_id") or DEFAULT_VOICE_ID,
            model=_normalized_lookup(section, "model") or DEFAULT_SPEECH_MODEL,
            output_format=_normalized_lookup(section, "output_format") or DEFAULT_OUTPUT_FORMAT,
        )

    @staticmethod
    def _validate_keys(
        payload: Mapping[str, Any],
        supported: frozenset[str],
        source_label: str,
        required: frozenset[str] = frozenset(),
    ) -> None:
        """Validate supported and required keys of one mapping."""

        unknown = sorted(str(key) for key in set(payload).difference(supported))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        missing = sorted(key for key in required if key not in payload)
        if missing:
            key_list = ", ".join(missing)
            raise ValueError(f"{source_label} is missing required key(s): {key_list}.")

    @staticmethod
    def _optional_mapping(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> Mapping[str, Any]:
        """Read an optional nested mapping, treating `null` as empty."""

        raw = payload.get(key)
        if raw is None:
            return {}
        return ConfigLoader._require_mapping(raw, f"{source_label} field `{key}`")

    @staticmethod
    def _require_mapping(raw: object, label: str) -> Mapping[str, Any]:
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{label} must be a mapping/object.")
        return raw

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return default
        try:
            return parse_positive_int(payload[key], key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.") from exc

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        if key not in env:
            return None
        return parse_required_boolean(env.get(key), key)
