"""Tests for the analysis provider adapters."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from smart_error_lens.adapters.llm import (
    AnthropicProvider,
    GroqProvider,
    HuggingFaceProvider,
    MockProvider,
    OpenAIProvider,
    PaLMProvider,
)
from smart_error_lens.adapters.llm.huggingface import SECONDARY_MODEL
from smart_error_lens.adapters.llm.mock import MOCK_MARKER
from smart_error_lens.utils.errors import AnalysisError, AnalysisTimeoutError, RateLimitError


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


def _chat_response(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestMockProvider:
    """Test the mock provider."""

    async def test_embeds_prompt(self) -> None:
        """Test the response template."""
        provider = MockProvider()
        text = await provider.analyze("why did it fail?")

        assert text == f'{MOCK_MARKER} This is a simulated response for the prompt "why did it fail?"'
        assert provider.name == "mock"


class TestConstruction:
    """Test common provider construction rules."""

    @pytest.mark.parametrize("cls", [OpenAIProvider, GroqProvider, HuggingFaceProvider, PaLMProvider, AnthropicProvider])
    def test_empty_key_rejected(self, cls: type) -> None:
        """Test providers refuse a blank API key."""
        with pytest.raises(ValueError):
            cls("  ")

    def test_default_models(self) -> None:
        """Test each backend's default model."""
        assert GroqProvider("k").model_name == "mixtral-8x7b-32768"
        assert HuggingFaceProvider("k").model_name == "facebook/opt-1.3b"
        assert PaLMProvider("k").model_name == "models/text-bison-001"
        assert AnthropicProvider("k").model_name == "claude-3-5-sonnet-20241022"


class TestChatCompletions:
    """Test OpenAI and Groq."""

    async def test_openai_request_and_response(self) -> None:
        """Test the OpenAI request shape and parsed answer."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_chat_response("Check the divisor."))

        provider = OpenAIProvider("sk-test", transport=_transport(handler))
        text = await provider.analyze("prompt")

        assert text == "Check the divisor."
        request = seen[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body == {"model": "gpt-3.5-turbo", "messages": [{"role": "user", "content": "prompt"}]}

    async def test_groq_sends_system_prompt(self) -> None:
        """Test Groq adds its system message and sampling settings."""
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_chat_response("Use a guard clause."))

        provider = GroqProvider("gsk_test", transport=_transport(handler))
        assert await provider.analyze("prompt") == "Use a guard clause."

        body = bodies[0]
        assert body["messages"][0]["role"] == "system"
        assert body["messages"][1] == {"role": "user", "content": "prompt"}
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 1024

    async def test_rate_limit(self) -> None:
        """Test HTTP 429 maps to RateLimitError."""
        provider = OpenAIProvider(
            "sk-test",
            transport=_transport(lambda r: httpx.Response(429, headers={"retry-after": "12"})),
        )

        with pytest.raises(RateLimitError) as exc_info:
            await provider.analyze("prompt")
        assert exc_info.value.retry_after == 12

    async def test_server_error(self) -> None:
        """Test other HTTP failures map to AnalysisError."""
        provider = OpenAIProvider("sk-test", transport=_transport(lambda r: httpx.Response(500)))

        with pytest.raises(AnalysisError, match="HTTP 500"):
            await provider.analyze("prompt")

    async def test_timeout(self) -> None:
        """Test timeouts map to AnalysisTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        provider = OpenAIProvider("sk-test", transport=_transport(handler))

        with pytest.raises(AnalysisTimeoutError):
            await provider.analyze("prompt")

    async def test_malformed_response(self) -> None:
        """Test a response without choices is rejected."""
        provider = OpenAIProvider("sk-test", transport=_transport(lambda r: httpx.Response(200, json={})))

        with pytest.raises(AnalysisError, match="Malformed"):
            await provider.analyze("prompt")

    async def test_empty_content(self) -> None:
        """Test a blank completion is rejected."""
        provider = OpenAIProvider(
            "sk-test", transport=_transport(lambda r: httpx.Response(200, json=_chat_response("")))
        )

        with pytest.raises(AnalysisError):
            await provider.analyze("prompt")


class TestHuggingFace:
    """Test the HuggingFace provider."""

    async def test_list_response(self) -> None:
        """Test the usual list-shaped answer."""
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=[{"generated_text": "Divisor is zero."}])

        provider = HuggingFaceProvider("hf_test", transport=_transport(handler))

        assert await provider.analyze("prompt") == "Divisor is zero."
        assert bodies[0]["inputs"] == "prompt"
        assert bodies[0]["parameters"]["max_new_tokens"] == 250
        assert bodies[0]["parameters"]["top_p"] == 0.95

    async def test_secondary_model_on_failure(self) -> None:
        """Test one retry against the secondary model."""
        urls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            if SECONDARY_MODEL in str(request.url):
                return httpx.Response(200, json={"generated_text": "From the small model."})
            return httpx.Response(503)

        provider = HuggingFaceProvider("hf_test", transport=_transport(handler))

        assert await provider.analyze("prompt") == "From the small model."
        assert len(urls) == 2
        assert urls[0].endswith("facebook/opt-1.3b")
        assert urls[1].endswith(SECONDARY_MODEL)

    async def test_secondary_model_not_retried(self) -> None:
        """Test no extra attempt when already on the secondary model."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            return httpx.Response(503)

        provider = HuggingFaceProvider("hf_test", SECONDARY_MODEL, transport=_transport(handler))

        with pytest.raises(AnalysisError):
            await provider.analyze("prompt")
        assert len(calls) == 1


class TestPaLM:
    """Test the PaLM provider."""

    async def test_generate_text(self) -> None:
        """Test the key is sent as a query parameter."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"candidates": [{"output": "Validate b first."}]})

        provider = PaLMProvider("AIza-test", transport=_transport(handler))

        assert await provider.analyze("prompt") == "Validate b first."
        assert seen[0].url.params["key"] == "AIza-test"
        assert seen[0].url.path == "/v1beta2/models/text-bison-001:generateText"

    async def test_no_candidates(self) -> None:
        """Test an empty candidate list is an error."""
        provider = PaLMProvider(
            "AIza-test", transport=_transport(lambda r: httpx.Response(200, json={"candidates": []}))
        )

        with pytest.raises(AnalysisError, match="No response from PaLM"):
            await provider.analyze("prompt")

    async def test_non_object_candidate(self) -> None:
        """Test a candidate that isn't an object is reported as malformed."""
        provider = PaLMProvider(
            "AIza-test", transport=_transport(lambda r: httpx.Response(200, json={"candidates": ["text"]}))
        )

        with pytest.raises(AnalysisError, match="Malformed"):
            await provider.analyze("prompt")


class TestAnthropic:
    """Test the Anthropic provider."""

    @staticmethod
    def _client(create: AsyncMock) -> MagicMock:
        client = MagicMock()
        client.messages.create = create
        client.close = AsyncMock()
        return client

    async def test_analyze_joins_text_blocks(self) -> None:
        """Test text blocks are concatenated and other blocks ignored."""
        response = MagicMock()
        response.content = [
            MagicMock(type="text", text="Root cause: "),
            MagicMock(type="tool_use", text="ignored"),
            MagicMock(type="text", text="b is zero."),
        ]
        create = AsyncMock(return_value=response)

        with patch("smart_error_lens.adapters.llm.anthropic.anthropic.AsyncAnthropic") as mock_cls:
            client = self._client(create)
            mock_cls.return_value = client

            text = await AnthropicProvider("sk-ant-test", timeout=5).analyze("prompt")

        assert text == "Root cause: b is zero."
        mock_cls.assert_called_once_with(api_key="sk-ant-test", timeout=5)
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-sonnet-20241022"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
        client.close.assert_awaited_once()

    async def test_rate_limit(self) -> None:
        """Test SDK rate limit errors are mapped."""
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.RateLimitError(
            "rate limited", response=httpx.Response(429, request=request), body=None
        )

        with patch("smart_error_lens.adapters.llm.anthropic.anthropic.AsyncAnthropic") as mock_cls:
            client = self._client(AsyncMock(side_effect=error))
            mock_cls.return_value = client

            with pytest.raises(RateLimitError):
                await AnthropicProvider("sk-ant-test").analyze("prompt")

        client.close.assert_awaited_once()

    async def test_timeout(self) -> None:
        """Test SDK timeouts are mapped."""
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")

        with patch("smart_error_lens.adapters.llm.anthropic.anthropic.AsyncAnthropic") as mock_cls:
            mock_cls.return_value = self._client(
                AsyncMock(side_effect=anthropic.APITimeoutError(request=request))
            )

            with pytest.raises(AnalysisTimeoutError):
                await AnthropicProvider("sk-ant-test").analyze("prompt")

    async def test_empty_response(self) -> None:
        """Test a response without text is rejected."""
        response = MagicMock()
        response.content = []

        with patch("smart_error_lens.adapters.llm.anthropic.anthropic.AsyncAnthropic") as mock_cls:
            mock_cls.return_value = self._client(AsyncMock(return_value=response))

            with pytest.raises(AnalysisError):
                await AnthropicProvider("sk-ant-test").analyze("prompt")
