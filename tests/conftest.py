"""Shared pytest fixtures for the full Notevoice test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
import requests

from notevoice.config import NotevoiceConfig, SpeechSettings, TextBackendSettings
from notevoice.models.datatypes import SynthesisRequest
from notevoice.tts.voices import VoiceProfile


class InMemoryNoteStore:
    """Dictionary-backed note store that records every operation."""

    def __init__(self, files: dict[str, str | bytes] | None = None) -> None:
        """Initialize the store with optional pre-seeded files."""

        self.files: dict[str, str | bytes] = dict(files or {})
        self.operations: list[tuple[str, str]] = []

    def read(self, path: str) -> str:
        """Return stored note text or raise like the filesystem would."""

        self.operations.append(("read", path))
        if path not in self.files:
            raise FileNotFoundError(path)
        value = self.files[path]
        assert isinstance(value, str)
        return value

    def replace(self, path: str, content: str) -> None:
        """Replace note text."""

        self.operations.append(("replace", path))
        self.files[path] = content

    def exists(self, path: str) -> bool:
        """Return whether a path is present."""

        return path in self.files

    def delete(self, path: str) -> None:
        """Delete a path."""

        self.operations.append(("delete", path))
        del self.files[path]

    def write_bytes(self, path: str, data: bytes) -> None:
        """Store binary artifact bytes."""

        self.operations.append(("write_bytes", path))
        self.files[path] = bytes(data)

    @property
    def writes(self) -> list[tuple[str, str]]:
        """Return mutating operations only."""

        return [operation for operation in self.operations if operation[0] != "read"]


class FakeTextClient:
    """Text-generation client returning a canned reply."""

    provider_id = "fake"
    model = "fake-model"

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        """Initialize canned reply or failure."""

        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str, float]] = []
        self.key_valid = True

    def generate_text(
        self, user_instruction: str, system_instruction: str, temperature: float = 0.3
    ) -> str:
        """Record the call and return the canned reply."""

        self.calls.append((user_instruction, system_instruction, temperature))
        if self.error is not None:
            raise self.error
        return self.reply

    def validate_api_key(self) -> bool:
        """Return the configured validity flag."""

        return self.key_valid


class FakeSpeechClient:
    """Speech client returning deterministic per-chunk bytes."""

    def __init__(self, api_key: str = "el-test-key", fail_on_call: int | None = None) -> None:
        """Initialize with an optional 1-based call number that raises."""

        self.api_key = api_key
        self.fail_on_call = fail_on_call
        self.requests: list[SynthesisRequest] = []
        self.key_valid = True
        self.voices = [
            VoiceProfile(voice_id="4JJwo477JUAx3HV0T7n7", name="Narrator", category="premade"),
            VoiceProfile(voice_id="voice-2", name="Second", category="cloned"),
        ]

    def synthesize_speech(self, request: SynthesisRequest) -> bytes:
        """Record the request and return `<n>|` style audio bytes."""

        self.requests.append(request)
        if self.fail_on_call is not None and len(self.requests) == self.fail_on_call:
            raise requests.ConnectionError("speech backend unreachable")
        return f"[chunk{len(self.requests)}]".encode("utf-8")

    def validate_api_key(self) -> bool:
        """Return the configured validity flag."""

        return self.key_valid

    def list_voices(self) -> list[VoiceProfile]:
        """Return canned voices."""

        return list(self.voices)


class RecordingProviderFactory:
    """Provider factory stand-in that hands out fakes and records requests."""

    def __init__(self, text_client: FakeTextClient, speech_client: FakeSpeechClient) -> None:
        """Initialize with the clients to hand out."""

        self.text_client = text_client
        self.speech_client = speech_client
        self.text_requests: list[tuple[str, str | None, str | None]] = []
        self.speech_requests: list[str | None] = []

    def create_text_client(
        self, backend_id: str, api_key: str | None, model: str | None = None
    ) -> FakeTextClient:
        """Record and return the fake text client."""

        self.text_requests.append((backend_id, api_key, model))
        return self.text_client

    def create_speech_client(self, api_key: str | None) -> FakeSpeechClient:
        """Record and return the fake speech client."""

        self.speech_requests.append(api_key)
        return self.speech_client


class InMemoryCredentialStore:
    """Credential store keeping provider keys in a dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize the store with optional provider keys."""

        self.keys: dict[str, str] = dict(initial or {})

    def is_available(self) -> bool:
        """Return availability flag expected by the CLI status command."""

        return True

    def get_api_key(self, provider: str) -> str | None:
        """Return the stored key for a provider."""

        return self.keys.get(provider)

    def set_api_key(self, provider: str, api_key: str) -> None:
        """Store a normalized key."""

        self.keys[provider] = api_key.strip()

    def clear_api_key(self, provider: str) -> bool:
        """Clear a key and report whether one existed."""

        return self.keys.pop(provider, None) is not None

    def load_runtime_secrets(self) -> dict[str, str]:
        """Return keys mapped by runtime-source key."""

        return {f"{provider}_api_key": value for provider, value in self.keys.items()}


@pytest.fixture(autouse=True)
def _block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly if a test reaches the real HTTP transport."""

    def _refuse(*_args: object, **_kwargs: object) -> None:
        raise AssertionError("Unexpected network access in tests.")

    monkeypatch.setattr(requests, "post", _refuse)
    monkeypatch.setattr(requests, "get", _refuse)


@pytest.fixture
def note_store() -> InMemoryNoteStore:
    """Provide an empty in-memory note store."""

    return InMemoryNoteStore()


@pytest.fixture
def text_client() -> FakeTextClient:
    """Provide a fake text client with a long Korean summary reply."""

    return FakeTextClient(
        reply=(
            "이 노트는 파이프라인이 마크다운을 음성으로 바꾸는 과정을 설명합니다. "
            "먼저 노트를 읽고, 필요하면 요약한 다음, 음성 합성을 진행합니다."
        )
    )


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    """Provide a fake speech client."""

    return FakeSpeechClient()


@pytest.fixture
def provider_factory(
    text_client: FakeTextClient, speech_client: FakeSpeechClient
) -> RecordingProviderFactory:
    """Provide a recording provider factory wired to the fake clients."""

    return RecordingProviderFactory(text_client, speech_client)


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    """Provide an empty in-memory credential store."""

    return InMemoryCredentialStore()


@pytest.fixture
def make_config() -> Callable[..., NotevoiceConfig]:
    """Build configs with both keys present unless overridden."""

    def _make(
        *,
        text_key: str | None = "xai-test-key-123456",
        speech_key: str | None = "el-test-key",
        **overrides: object,
    ) -> NotevoiceConfig:
        values: dict[str, object] = {
            "vault_root": Path("."),
            "backends": {"xai": TextBackendSettings(api_key=text_key)},
            "speech": SpeechSettings(api_key=speech_key),
        }
        values.update(overrides)
        return NotevoiceConfig(**values)  # type: ignore[arg-type]

    return _make
