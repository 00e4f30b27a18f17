"""Shared HTTP plumbing for text-generation and speech backends.

Responsibilities:
- Send JSON requests with provider-specific authentication.
- Map HTTP and transport failures onto `ExternalServiceError` consistently.
"""

from __future__ import annotations

import json
import socket
from typing import Any

import requests

from ..errors import EmptyResponseError, ExternalServiceError, ValidationError, redact_secrets


class ProviderHttpClient:
    """Provider HTTP settings and helpers shared by all backend clients."""

    provider_label = "Provider"

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize provider HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _auth_headers(self) -> dict[str, str]:
        """Return authentication headers; overridden per provider."""

        return {}

    def _auth_params(self) -> dict[str, str]:
        """Return authentication query parameters; overridden per provider."""

        return {}

    def _require_api_key(self) -> None:
        """Require API key presence before issuing provider requests."""

        if not self.api_key:
            raise ValidationError(
                f"Missing {self.provider_label} API key. Add it to the config file, "
                "environment, or `notevoice credentials`."
            )

    def _request(
        self,
        method: str,
        endpoint_path: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> requests.Response:
        """Execute one request and map failures to provider exceptions."""

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {"Content-Type": "application/json", **self._auth_headers()}
        query = {**self._auth_params(), **(params or {})}
        try:
            if method == "POST":
                response = requests.post(
                    endpoint,
                    headers=headers,
                    params=query or None,
                    json=payload,
                    timeout=self.timeout_seconds,
                )
            else:
                response = requests.get(
                    endpoint,
                    headers=headers,
                    params=query or None,
                    timeout=self.timeout_seconds,
                )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise self._http_error_to_service_error(exc) from exc
        except requests.RequestException as exc:
            raise ExternalServiceError(
                provider=self.provider_label,
                status_code=None,
                body=redact_secrets(str(exc)),
                failure_kind=self._classify_transport_failure(exc),
            ) from exc
        return response

    def _post_json(self, endpoint_path: str, payload: dict[str, Any]) -> Any:
        """POST a JSON payload and return the decoded JSON response."""

        response = self._request("POST", endpoint_path, payload=payload)
        try:
            return json.loads(bytes(response.content).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise EmptyResponseError(
                self.provider_label,
                f"{self.provider_label} returned an invalid JSON payload.",
            ) from exc

    def _post_binary(self, endpoint_path: str, payload: dict[str, Any], params: dict[str, str]) -> bytes:
        """POST a JSON payload and return the raw binary response body."""

        response = self._request("POST", endpoint_path, payload=payload, params=params)
        return bytes(response.content)

    def _get_json(self, endpoint_path: str) -> Any:
        """GET an endpoint and return the decoded JSON response."""

        response = self._request("GET", endpoint_path)
        content = bytes(response.content)
        if not content:
            return None
        try:
            return json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise EmptyResponseError(
                self.provider_label,
                f"{self.provider_label} returned an invalid JSON payload.",
            ) from exc

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @staticmethod
    def _classify_http_failure(status_code: int, body: str) -> str:
        """Classify HTTP errors into deterministic diagnostic kinds."""

        body_lower = body.lower()
        if status_code in {401, 403} or "api key" in body_lower:
            return "invalid_api_key"
        if status_code == 429:
            return "rate_limited"
        if status_code in {408, 504} or "timed out" in body_lower:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, (TimeoutError, socket.timeout, requests.Timeout)):
            return "timeout"
        return "transport"

    def _http_error_to_service_error(self, exc: requests.HTTPError) -> ExternalServiceError:
        """Convert HTTP errors into provider exceptions carrying status and body."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = self._decode_error_body(exc)
        return ExternalServiceError(
            provider=self.provider_label,
            status_code=status_code,
            body=body,
            failure_kind=self._classify_http_failure(status_code, body),
        )
