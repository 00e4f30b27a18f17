"""Domain exceptions for pipeline, provider, and CLI diagnostics.

Responsibilities:
- Define the failure taxonomy shared by text-generation and speech backends.
- Keep user-facing messages concise and free of secret values.
"""

from __future__ import annotations

import re


_MAX_MESSAGE_BODY_CHARS = 180


def redact_secrets(text: str) -> str:
    """Redact API-key-like tokens from provider error content."""

    redacted = re.sub(r"\b(?:sk|xai)-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
    redacted = re.sub(r"(?i)bearer\s+[A-Za-z0-9._-]{12,}", "Bearer [redacted-token]", redacted)
    return re.sub(r"(?i)([?&]key=)[A-Za-z0-9_-]{8,}", r"\1[redacted-key]", redacted)


def _short_body(body: str) -> str:
    """Compact a provider response body into a one-line, redacted excerpt."""

    compact = redact_secrets(" ".join(body.split()))
    if len(compact) <= _MAX_MESSAGE_BODY_CHARS:
        return compact
    return f"{compact[: _MAX_MESSAGE_BODY_CHARS - 1]}..."


class NotevoiceError(RuntimeError):
    """Base class for failures raised by Notevoice components."""


class ValidationError(NotevoiceError):
    """Raised when required credentials or settings are missing."""


class ExternalServiceError(NotevoiceError):
    """Raised when a backend responds with a non-success status or is unreachable."""

    def __init__(
        self,
        *,
        provider: str,
        status_code: int | None,
        body: str = "",
        failure_kind: str = "http_error",
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        self.provider = provider
        self.status_code = status_code
        self.body = body
        self.failure_kind = failure_kind
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.status_code is None:
            headline = f"{self.provider} request failed"
        else:
            headline = f"{self.provider} API error (HTTP {self.status_code})"
        excerpt = _short_body(self.body)
        if excerpt:
            return f"{headline}: {excerpt}"
        return f"{headline}."


class EmptyResponseError(NotevoiceError):
    """Raised when a backend succeeds but returns no usable content."""

    def __init__(self, provider: str, detail: str | None = None) -> None:
        self.provider = provider
        super().__init__(detail or f"No response content from {provider} API.")


class UnknownBackendError(NotevoiceError, ValueError):
    """Raised when a backend identifier has no registered implementation."""

    def __init__(self, backend_id: str, supported: tuple[str, ...] = ()) -> None:
        self.backend_id = backend_id
        message = f"Unknown text-generation backend `{backend_id}`."
        if supported:
            message = f"{message} Supported: {', '.join(supported)}."
        super().__init__(message)


class PipelineStageError(NotevoiceError):
    """Raised when a CLI or configuration stage fails before the pipeline runs."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
