"""Unit tests for the HTTP text-generation backends."""

from __future__ import annotations

import json
from typing import Any

import pytest

from notevoice.errors import EmptyResponseError, ExternalServiceError, ValidationError
from notevoice.llm import http_client as provider_http
from notevoice.llm.anthropic_client import AnthropicTextClient
from notevoice.llm.gemini_client import GeminiTextClient
from notevoice.llm.openai_client import OpenAITextClient, XAITextClient


class _MockRequestsResponse:
    """Minimal requests response mock for HTTP transport patching."""

    def __init__(self, *, payload: bytes, status_code: int = 200) -> None:
        """Initialize response with raw payload bytes and HTTP status."""

        self.content = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        """Raise HTTPError when the response status represents a failure."""

        if self.status_code >= 400:
            raise provider_http.requests.HTTPError(
                f"HTTP {self.status_code} error",
                response=self,
            )


def _json_response(payload: Any, status_code: int = 200) -> _MockRequestsResponse:
    return _MockRequestsResponse(payload=json.dumps(payload).encode("utf-8"), status_code=status_code)


def _capture_post(
    monkeypatch: pytest.MonkeyPatch, response: _MockRequestsResponse
) -> list[dict[str, Any]]:
    """Patch `requests.post` to record calls and return a fixed response."""

    calls: list[dict[str, Any]] = []

    def _mock_post(url: str, **kwargs: Any) -> _MockRequestsResponse:
        calls.append({"url": url, **kwargs})
        return response

    monkeypatch.setattr("notevoice.llm.http_client.requests.post", _mock_post)
    return calls


def test_openai_client_sends_chat_completion(monkeypatch: pytest.MonkeyPatch) -> None:
    """OpenAI requests use bearer auth and cap output tokens."""

    calls = _capture_post(
        monkeypatch, _json_response({"choices": [{"message": {"content": "  요약문  "}}]})
    )

    client = OpenAITextClient(api_key="sk-test-openai-key", model="gpt-4o")
    text = client.generate_text("user text", "system text", 0.3)

    assert text == "요약문"
    call = calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test-openai-key"
    assert call["json"] == {
        "model": "gpt-4o",
        "messages": [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ],
        "temperature": 0.3,
        "max_tokens": 2048,
    }


def test_xai_client_disables_streaming_and_uses_default_model(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """xAI requests go to the xAI host with streaming off and no token cap."""

    calls = _capture_post(
        monkeypatch, _json_response({"choices": [{"message": {"content": "ok"}}]})
    )

    client = XAITextClient(api_key="xai-test-key-123456")
    client.generate_text("u", "s")

    call = calls[0]
    assert call["url"] == "https://api.x.ai/v1/chat/completions"
    assert call["json"]["model"] == XAITextClient.default_model
    assert call["json"]["stream"] is False
    assert "max_tokens" not in call["json"]
    assert call["json"]["temperature"] == 0.3


def test_anthropic_client_sends_messages_request(monkeypatch: pytest.MonkeyPatch) -> None:
    """Anthropic requests use the key header and API version header."""

    calls = _capture_post(
        monkeypatch, _json_response({"content": [{"type": "text", "text": "answer"}]})
    )

    client = AnthropicTextClient(api_key="ant-key", model="claude-test")
    text = client.generate_text("question", "be brief", 0.3)

    assert text == "answer"
    call = calls[0]
    assert call["url"] == "https://api.anthropic.com/v1/messages"
    assert call["headers"]["x-api-key"] == "ant-key"
    assert call["headers"]["anthropic-version"] == "2023-06-01"
    assert call["json"]["system"] == "be brief"
    assert call["json"]["max_tokens"] == 2048
    assert call["json"]["messages"] == [{"role": "user", "content": "question"}]


def test_gemini_client_uses_key_param_and_joins_parts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Gemini authenticates by query parameter and concatenates text parts."""

    calls = _capture_post(
        monkeypatch,
        _json_response(
            {"candidates": [{"content": {"parts": [{"text": "first "}, {"text": "second"}]}}]}
        ),
    )

    client = GeminiTextClient(api_key="gem-key", model="gemini-test")
    text = client.generate_text("prompt", "system")

    assert text == "first second"
    call = calls[0]
    assert call["url"] == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"
    )
    assert call["params"] == {"key": "gem-key"}
    assert call["json"]["systemInstruction"] == {"parts": [{"text": "system"}]}
    assert call["json"]["generationConfig"]["maxOutputTokens"] == 2048


def test_gemini_client_ignores_non_string_parts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Malformed part payloads are skipped; nothing usable is an empty response."""

    _capture_post(
        monkeypatch,
        _json_response(
            {"candidates": [{"content": {"parts": [{"text": 42}, {"text": "ok"}, "raw"]}}]}
        ),
    )
    client = GeminiTextClient(api_key="gem-key", model="gemini-test")

    assert client.generate_text("prompt", "system") == "ok"

    _capture_post(
        monkeypatch,
        _json_response({"candidates": [{"content": {"parts": [{"text": ["x"]}]}}]}),
    )

    with pytest.raises(EmptyResponseError):
        client.generate_text("prompt", "system")


def test_http_error_carries_status_kind_and_redacted_body(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Non-success statuses raise a provider error without leaking keys."""

    _capture_post(
        monkeypatch,
        _MockRequestsResponse(
            payload=b'{"error": "Incorrect API key provided: sk-abcdefghijklmnop"}',
            status_code=401,
        ),
    )

    client = OpenAITextClient(api_key="sk-abcdefghijklmnop")

    with pytest.raises(ExternalServiceError) as exc_info:
        client.generate_text("u", "s")

    error = exc_info.value
    assert error.status_code == 401
    assert error.failure_kind == "invalid_api_key"
    assert "401" in str(error)
    assert "sk-abcdefghijklmnop" not in str(error)
    assert "sk-abcdefghijklmnop" in error.body


@pytest.mark.parametrize(
    ("status_code", "expected_kind"),
    [(429, "rate_limited"), (504, "timeout"), (500, "http_error")],
)
def test_http_error_classification(
    monkeypatch: pytest.MonkeyPatch, status_code: int, expected_kind: str
) -> None:
    """Status codes map onto deterministic failure kinds."""

    _capture_post(monkeypatch, _MockRequestsResponse(payload=b"", status_code=status_code))

    with pytest.raises(ExternalServiceError) as exc_info:
        OpenAITextClient(api_key="k").generate_text("u", "s")

    assert exc_info.value.failure_kind == expected_kind


def test_transport_failure_has_no_status(monkeypatch: pytest.MonkeyPatch) -> None:
    """Connection failures surface as provider errors without a status code."""

    def _mock_post(_url: str, **_kwargs: object) -> _MockRequestsResponse:
        raise provider_http.requests.ConnectionError("network down")

    monkeypatch.setattr("notevoice.llm.http_client.requests.post", _mock_post)

    with pytest.raises(ExternalServiceError, match="request failed") as exc_info:
        XAITextClient(api_key="k").generate_text("u", "s")

    assert exc_info.value.status_code is None
    assert exc_info.value.failure_kind == "transport"


@pytest.mark.parametrize(
    ("client_class", "payload"),
    [
        (OpenAITextClient, {"choices": []}),
        (XAITextClient, {"choices": [{"message": {"content": "   "}}]}),
        (AnthropicTextClient, {"content": []}),
        (GeminiTextClient, {"candidates": [{"content": {"parts": []}}]}),
    ],
)
def test_empty_responses_raise(
    monkeypatch: pytest.MonkeyPatch, client_class: type, payload: dict[str, Any]
) -> None:
    """A success status without usable text is an empty-response failure."""

    _capture_post(monkeypatch, _json_response(payload))

    with pytest.raises(EmptyResponseError):
        client_class(api_key="k").generate_text("u", "s")


def test_missing_key_fails_before_any_request(monkeypatch: pytest.MonkeyPatch) -> None:
    """A blank key is a validation error and no HTTP call is made."""

    calls = _capture_post(monkeypatch, _json_response({}))

    with pytest.raises(ValidationError, match="Missing OpenAI API key"):
        OpenAITextClient(api_key="   ").generate_text("u", "s")

    assert calls == []


@pytest.mark.parametrize("client_class", [OpenAITextClient, XAITextClient, GeminiTextClient])
def test_validate_api_key_probes_models_endpoint(
    monkeypatch: pytest.MonkeyPatch, client_class: type
) -> None:
    """Key validation lists models and reports acceptance as a boolean."""

    urls: list[str] = []

    def _mock_get(url: str, **_kwargs: object) -> _MockRequestsResponse:
        urls.append(url)
        return _json_response({"data": []})

    monkeypatch.setattr("notevoice.llm.http_client.requests.get", _mock_get)

    assert client_class(api_key="valid-key").validate_api_key() is True
    assert urls[0].endswith("/models")


@pytest.mark.parametrize("client_class", [OpenAITextClient, XAITextClient, GeminiTextClient])
def test_validate_api_key_returns_false_on_rejection(
    monkeypatch: pytest.MonkeyPatch, client_class: type
) -> None:
    """A rejected key is reported as invalid instead of raising."""

    def _mock_get(_url: str, **_kwargs: object) -> _MockRequestsResponse:
        return _MockRequestsResponse(payload=b'{"error": "unauthorized"}', status_code=401)

    monkeypatch.setattr("notevoice.llm.http_client.requests.get", _mock_get)

    assert client_class(api_key="bad-key").validate_api_key() is False


def test_anthropic_validation_sends_minimal_message(monkeypatch: pytest.MonkeyPatch) -> None:
    """Anthropic key validation issues a tiny messages request."""

    calls = _capture_post(
        monkeypatch, _json_response({"content": [{"type": "text", "text": "OK"}]})
    )

    assert AnthropicTextClient(api_key="ant-key").validate_api_key() is True
    assert calls[0]["json"]["messages"] == [{"role": "user", "content": "test"}]


def test_validate_api_key_without_key_is_false() -> None:
    """A missing key is invalid without touching the network."""

    assert OpenAITextClient(api_key=None).validate_api_key() is False
