"""Secure credential storage helpers for the Notevoice CLI.

Responsibilities:
- Persist provider API keys in an OS-backed secure credential store.
- Provide deterministic read/write/delete operations per provider account.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for provider credential persistence.
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import keyring
from keyring.errors import KeyringError
from loguru import logger


_DEFAULT_SERVICE_NAME = "notevoice"
CREDENTIAL_PROVIDERS: tuple[str, ...] = ("xai", "openai", "anthropic", "gemini", "elevenlabs")


def runtime_key_for(provider: str) -> str:
    """Return the runtime-source key under which a provider API key is resolved."""

    return f"{provider}_api_key"


class CredentialStore:
    """Interface for secure provider credential operations."""

    def is_available(self) -> bool:
        """Return whether secure credential operations are available."""

        raise NotImplementedError

    def get_api_key(self, provider: str) -> str | None:
        """Load the stored API key for `provider`, when available."""

        raise NotImplementedError

    def set_api_key(self, provider: str, api_key: str) -> None:
        """Persist an API key for `provider`."""

        raise NotImplementedError

    def clear_api_key(self, provider: str) -> bool:
        """Delete a stored API key and return whether one existed."""

        raise NotImplementedError

    def load_runtime_secrets(self) -> dict[str, str]:
        """Return every stored key mapped by its runtime-source key."""

        secrets: dict[str, str] = {}
        for provider in CREDENTIAL_PROVIDERS:
            value = self.get_api_key(provider)
            if value is not None:
                secrets[runtime_key_for(provider)] = value
        return secrets


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package, one account per provider."""

    service_name: str = _DEFAULT_SERVICE_NAME

    def _keyring_module(self) -> Any:
        """Return the keyring module; replaced in tests."""

        return keyring

    def is_available(self) -> bool:
        """Return `True` when a usable keyring backend is configured."""

        backend = self._keyring_module().get_keyring()
        return getattr(backend, "priority", 0) > 0

    def get_api_key(self, provider: str) -> str | None:
        """Get a normalized API key from keyring, returning `None` when missing."""

        _require_known_provider(provider)
        value = self._keyring_module().get_password(self.service_name, provider)
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    def set_api_key(self, provider: str, api_key: str) -> None:
        """Persist a normalized API key in keyring."""

        _require_known_provider(provider)
        normalized = api_key.strip()
        if not normalized:
            raise ValueError("API key must be a non-empty string.")
        self._keyring_module().set_password(self.service_name, provider, normalized)

    def clear_api_key(self, provider: str) -> bool:
        """Remove the stored API key from keyring and report if one was present."""

        if self.get_api_key(provider) is None:
            return False
        self._keyring_module().delete_password(self.service_name, provider)
        return True

    def load_runtime_secrets(self) -> dict[str, str]:
        """Return stored keys, or nothing when the keyring backend is unusable."""

        try:
            return CredentialStore.load_runtime_secrets(self)
        except KeyringError as exc:
            logger.debug("Secure credential lookup unavailable: {}", type(exc).__name__)
            return {}


def _require_known_provider(provider: str) -> None:
    if provider not in CREDENTIAL_PROVIDERS:
        supported = ", ".join(CREDENTIAL_PROVIDERS)
        raise ValueError(f"Unsupported credential provider `{provider}`; supported: {supported}.")


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
