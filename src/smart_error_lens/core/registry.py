"""Provider registry: maps a provider name to its constructor."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import structlog

from smart_error_lens.adapters.llm import (
    AnthropicProvider,
    GroqProvider,
    HuggingFaceProvider,
    MockProvider,
    OpenAIProvider,
    PaLMProvider,
)
from smart_error_lens.interfaces.provider import AnalysisProvider
from smart_error_lens.utils.errors import ConfigError, ConfigErrorKind

log = structlog.get_logger()

ProviderFactory = Callable[..., AnalysisProvider]

PROVIDERS: Mapping[str, ProviderFactory] = {
    "mock": MockProvider,
    "openai": OpenAIProvider,
    "huggingface": HuggingFaceProvider,
    "palm": PaLMProvider,
    "anthropic": AnthropicProvider,
    "groq": GroqProvider,
}


def available_providers(registry: Mapping[str, ProviderFactory] | None = None) -> list[str]:
    """Return the registered provider names, sorted."""
    return sorted(PROVIDERS if registry is None else registry)


def create_provider(
    name: str,
    api_key: str | None,
    model: str | None = None,
    *,
    timeout: float | None = None,
    registry: Mapping[str, ProviderFactory] | None = None,
) -> AnalysisProvider:
    """Instantiate the provider registered under ``name``.

    Args:
        name: Registry key, e.g. "openai".
        api_key: Backend API key.
        model: Optional model override.
        timeout: Optional request timeout for network-backed providers.
        registry: Alternative name-to-factory mapping. Defaults to ``PROVIDERS``.

    Returns:
        A ready provider instance.

    Raises:
        ConfigError: ``UNKNOWN_PROVIDER`` if the name isn't registered,
            ``PROVIDER_INIT_FAILED`` if the constructor raised.
    """
    factories = PROVIDERS if registry is None else registry
    factory = factories.get(name)
    if factory is None:
        raise ConfigError(
            ConfigErrorKind.UNKNOWN_PROVIDER,
            name=name,
            message=f"Unknown provider {name!r}; expected one of {sorted(factories)}",
        )

    kwargs = {} if timeout is None else {"timeout": timeout}

    try:
        return factory(api_key, model, **kwargs)
    except Exception as e:
        log.error("provider_init_failed", provider=name, error_type=type(e).__name__, error=str(e))
        raise ConfigError(
            ConfigErrorKind.PROVIDER_INIT_FAILED,
            name=name,
            message=f"Failed to initialize provider {name!r}: {e}",
        ) from e
