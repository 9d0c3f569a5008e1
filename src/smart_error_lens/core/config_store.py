"""Process-wide configuration store.

Holds the active ``ProviderConfig`` and the provider instance built from it
as one immutable ``ConfigSnapshot``. ``configure()`` merges and instantiates
inside a single critical section and then swaps the snapshot reference;
readers take the snapshot once per operation, so an in-flight analysis
always sees one consistent provider even while another thread reconfigures.

Decision table applied on every configure:

- ``mock_mode`` set, no ``api_key``, or provider "mock" → mock provider
- known provider with ``api_key`` → that provider
- unknown provider → mock provider, then ``ConfigError(UNKNOWN_PROVIDER)``
- provider constructor raised → mock provider, then
  ``ConfigError(PROVIDER_INIT_FAILED)``

Every path leaves a usable provider behind, even the ones that raise.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from smart_error_lens.adapters.llm.mock import MOCK_PROVIDER_NAME, MockProvider
from smart_error_lens.config.schema import CONFIG_KEY_ALIASES, ProviderConfig
from smart_error_lens.core.registry import ProviderFactory, create_provider
from smart_error_lens.interfaces.provider import AnalysisProvider
from smart_error_lens.utils.errors import ConfigError, ConfigErrorKind
from smart_error_lens.utils.logging import LogEventNames

log = structlog.get_logger()

# Fields whose change requires building a new provider instance
PROVIDER_FIELDS = frozenset({"provider", "api_key", "model", "mock_mode", "timeout"})


@dataclass(frozen=True)
class ConfigSnapshot:
    """The configuration and the provider built from it, read together."""

    config: ProviderConfig
    provider: AnalysisProvider

    @property
    def is_mock(self) -> bool:
        return self.provider.name == MOCK_PROVIDER_NAME


def normalize_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase option names to ``ProviderConfig`` field names."""
    return {CONFIG_KEY_ALIASES.get(key, key): value for key, value in patch.items()}


def merge_config(current: ProviderConfig, patch: Mapping[str, Any]) -> ProviderConfig:
    """Field-wise override of ``current`` by ``patch``.

    Raises:
        ConfigError: ``INVALID_CONFIG`` if the result fails validation.
    """
    try:
        return ProviderConfig.model_validate({**current.model_dump(), **normalize_patch(patch)})
    except ValidationError as e:
        raise ConfigError(
            ConfigErrorKind.INVALID_CONFIG, message=f"Invalid configuration: {e}"
        ) from e


def resolve_provider(
    config: ProviderConfig,
    registry: Mapping[str, ProviderFactory] | None = None,
) -> tuple[AnalysisProvider, ConfigError | None]:
    """Build the provider ``config`` asks for.

    Never raises: on failure the mock provider is returned together with
    the error the caller should surface.
    """
    if config.wants_mock:
        log.info(
            LogEventNames.MOCK_MODE_ACTIVE,
            reason="forced" if config.mock_mode else "no_api_key" if not config.api_key else "selected",
        )
        return MockProvider(), None

    try:
        provider = create_provider(
            config.provider,
            config.api_key,
            config.model,
            timeout=config.timeout,
            registry=registry,
        )
    except ConfigError as e:
        log.warning(
            LogEventNames.PROVIDER_CONFIG_FAILED,
            provider=config.provider,
            kind=e.kind.value,
            error=str(e),
        )
        return MockProvider(), e

    log.info(LogEventNames.PROVIDER_CONFIGURED, provider=provider.name, model=provider.model_name)
    return provider, None


class ConfigStore:
    """Thread-safe holder of the active configuration snapshot.

    Example:
        store = ConfigStore()
        store.configure(provider="openai", api_key="sk-...")
        snapshot = store.snapshot()
        text = await snapshot.provider.analyze(prompt)
    """

    def __init__(self, registry: Mapping[str, ProviderFactory] | None = None) -> None:
        """Initialize the store in mock mode.

        Args:
            registry: Alternative provider registry. Defaults to the built-in one.
        """
        self._registry = registry
        self._lock = threading.Lock()
        self._snapshot = ConfigSnapshot(ProviderConfig(), MockProvider())

    def snapshot(self) -> ConfigSnapshot:
        """Return the current snapshot. Read once per operation."""
        return self._snapshot

    @property
    def config(self) -> ProviderConfig:
        return self._snapshot.config

    @property
    def provider(self) -> AnalysisProvider:
        return self._snapshot.provider

    def configure(self, patch: Mapping[str, Any] | None = None, **options: Any) -> ConfigSnapshot:
        """Merge options into the current config and rebuild the provider.

        Accepts a mapping, keyword arguments, or both, using either
        ``ProviderConfig`` field names or the camelCase aliases (``apiKey``,
        ``mockMode``, ``collectStackTrace``, ``customPrompt``).

        Returns:
            The new snapshot.

        Raises:
            ConfigError: ``INVALID_CONFIG`` leaves the previous snapshot in
                place; ``UNKNOWN_PROVIDER`` and ``PROVIDER_INIT_FAILED`` are
                raised after the store has switched to the mock provider.
        """
        changes = {**(patch or {}), **options}

        with self._lock:
            merged = merge_config(self._snapshot.config, changes)
            provider, error = resolve_provider(merged, self._registry)
            self._snapshot = ConfigSnapshot(merged, provider)
            snapshot = self._snapshot

        if error is not None:
            raise error
        return snapshot

    def derive(self, overrides: Mapping[str, Any]) -> ConfigSnapshot:
        """Build a per-call snapshot without touching the shared state.

        The current provider instance is reused unless an override changes
        provider selection. Failures degrade to mock and are logged, never
        raised.
        """
        base = self._snapshot
        if not overrides:
            return base

        try:
            merged = merge_config(base.config, overrides)
        except ConfigError as e:
            log.warning(LogEventNames.PROVIDER_CONFIG_FAILED, kind=e.kind.value, error=str(e))
            return base

        if not PROVIDER_FIELDS.intersection(normalize_patch(overrides)):
            return ConfigSnapshot(merged, base.provider)

        provider, _ = resolve_provider(merged, self._registry)
        return ConfigSnapshot(merged, provider)

    def reset(self) -> ConfigSnapshot:
        """Return to the default configuration (mock provider)."""
        with self._lock:
            self._snapshot = ConfigSnapshot(ProviderConfig(), MockProvider())
            snapshot = self._snapshot
        log.info(LogEventNames.CONFIG_RESET)
        return snapshot


_store = ConfigStore()


def get_store() -> ConfigStore:
    """Return the process-wide configuration store."""
    return _store


def configure(patch: Mapping[str, Any] | None = None, **options: Any) -> ConfigSnapshot:
    """Configure the process-wide store. See ``ConfigStore.configure``."""
    return _store.configure(patch, **options)


def reset() -> ConfigSnapshot:
    """Reset the process-wide store to mock mode."""
    return _store.reset()
