"""Shared plumbing for backends reached with a single JSON POST over httpx.

A fresh ``httpx.AsyncClient`` is opened per request: intercepted synchronous
calls run their analysis on a short-lived event loop, so a pooled client
bound to one loop cannot be reused across calls.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from ...utils.errors import AnalysisError, AnalysisTimeoutError, RateLimitError

log = structlog.get_logger()

# Seconds allowed for a single backend request
DEFAULT_TIMEOUT = 60.0


def _parse_retry_after(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


class HTTPProvider:
    """Base class for httpx-backed providers.

    Subclasses set ``provider_name`` and ``default_model`` and implement
    ``analyze`` on top of ``_post_json``.
    """

    provider_name = ""
    default_model = ""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Backend API key.
            model: Model identifier. Defaults to ``default_model``.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.

        Raises:
            ValueError: If no API key is given.
        """
        if not api_key or not api_key.strip():
            raise ValueError(f"{self.provider_name} provider requires an API key")
        self._api_key = api_key
        self._model = model or self.default_model
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return self.provider_name

    @property
    def model_name(self) -> str:
        return self._model

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """POST ``payload`` and return the decoded JSON response.

        Raises:
            AnalysisTimeoutError: If the request timed out.
            RateLimitError: On HTTP 429.
            AnalysisError: On any other transport, status or decoding failure.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=payload, headers=headers, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            log.error("provider_timeout", provider=self.name, error=str(e))
            raise AnalysisTimeoutError(self.name, f"{self.name} request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                log.warning("provider_rate_limit", provider=self.name)
                raise RateLimitError(
                    self.name,
                    f"{self.name} rate limit exceeded",
                    retry_after=_parse_retry_after(e.response.headers.get("retry-after")),
                ) from e
            log.error("provider_api_error", provider=self.name, status=status)
            raise AnalysisError(self.name, f"{self.name} API error: HTTP {status}") from e
        except httpx.HTTPError as e:
            log.error("provider_request_failed", provider=self.name, error=str(e))
            raise AnalysisError(self.name, f"{self.name} request failed: {e}") from e
        except ValueError as e:
            log.error("provider_invalid_json", provider=self.name, error=str(e))
            raise AnalysisError(self.name, f"Invalid JSON from {self.name}: {e}") from e

    def _require_text(self, text: Any) -> str:
        """Reject missing or blank analysis text."""
        if not isinstance(text, str) or not text.strip():
            raise AnalysisError(self.name, f"{self.name} returned no analysis")
        return text


class ChatCompletionsProvider(HTTPProvider):
    """Provider for OpenAI-compatible ``/chat/completions`` endpoints."""

    endpoint = ""
    system_prompt: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None

    async def analyze(self, prompt: str) -> str:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {"model": self._model, "messages": messages}
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens

        data = await self._post_json(
            self.endpoint,
            payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AnalysisError(self.name, f"Malformed {self.name} response: {e!r}") from e
        return self._require_text(content)
