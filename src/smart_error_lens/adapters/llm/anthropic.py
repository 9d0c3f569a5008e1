"""Anthropic Claude provider.

Uses the Anthropic Python SDK. SDK exceptions are mapped onto the
pipeline's ``AnalysisError`` family so the analyzer can fall back to mock.
"""

from __future__ import annotations

import anthropic
import structlog

from ...utils.errors import AnalysisError, AnalysisTimeoutError, RateLimitError
from .http import DEFAULT_TIMEOUT

log = structlog.get_logger()

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
MAX_TOKENS = 1000


class AnthropicProvider:
    """Analyze prompts with a Claude model.

    Example:
        provider = AnthropicProvider(api_key="sk-ant-...")
        text = await provider.analyze(prompt)
    """

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Anthropic API key.
            model: Claude model identifier.
            timeout: Request timeout in seconds.

        Raises:
            ValueError: If no API key is given.
        """
        if not api_key or not api_key.strip():
            raise ValueError("anthropic provider requires an API key")
        self._api_key = api_key
        self._model = model or DEFAULT_MODEL
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self._model

    async def analyze(self, prompt: str) -> str:
        """Send the prompt as a single user message and join the text blocks.

        Raises:
            RateLimitError: If rate limit exceeded.
            AnalysisTimeoutError: If request times out.
            AnalysisError: On any other API failure or an empty response.
        """
        # A client per call: each analysis may run on its own event loop
        client = anthropic.AsyncAnthropic(api_key=self._api_key, timeout=self._timeout)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.RateLimitError as e:
            log.warning("anthropic_rate_limit", error=str(e))
            raise RateLimitError(self.name, f"Anthropic rate limit exceeded: {e}") from e
        except anthropic.APITimeoutError as e:
            log.error("anthropic_timeout", error=str(e))
            raise AnalysisTimeoutError(self.name, f"Anthropic request timed out: {e}") from e
        except anthropic.APIError as e:
            log.error("anthropic_api_error", error=str(e))
            raise AnalysisError(self.name, f"Anthropic API error: {e}") from e
        finally:
            await client.close()

        response_text = ""
        for block in response.content:
            if getattr(block, "type", None) == "text":
                response_text += block.text

        if not response_text.strip():
            raise AnalysisError(self.name, "Anthropic returned no analysis")
        return response_text
