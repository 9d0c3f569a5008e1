"""Exception hierarchy for the error analysis pipeline.

Three tiers of failure are distinguished:

- ``ConfigError``: bad or unknown provider, or a provider that could not be
  constructed. Non-fatal; the configuration store still lands in mock mode.
- ``AnalysisError``: a single backend call failed. Recovered locally by the
  analyzer's mock fallback and never surfaced to the intercepted caller.
- ``AnalysisPipelineError``: the fallback itself failed. Fatal; raised in
  place of the intercepted call's own error.
"""

from __future__ import annotations

from enum import StrEnum


class LensError(Exception):
    """Base exception for all Smart Error Lens errors."""


class ConfigErrorKind(StrEnum):
    """Reasons a configuration attempt can fail."""

    UNKNOWN_PROVIDER = "unknown_provider"
    PROVIDER_INIT_FAILED = "provider_init_failed"
    INVALID_CONFIG = "invalid_config"


class ConfigError(LensError):
    """Configuration failed.

    Attributes:
        kind: Which configuration step failed.
        name: The provider name involved, if any.
    """

    def __init__(self, kind: ConfigErrorKind, name: str | None = None, message: str = "") -> None:
        self.kind = kind
        self.name = name
        if not message:
            message = f"{kind.value}: {name}" if name else kind.value
        super().__init__(message)


class AnalysisError(LensError):
    """A single provider failed to produce an analysis.

    Attributes:
        backend: Name of the provider that failed.
    """

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        super().__init__(message)


class RateLimitError(AnalysisError):
    """Backend rate limit exceeded.

    Attributes:
        retry_after: Number of seconds to wait before retrying, if known.
    """

    def __init__(self, backend: str, message: str, retry_after: int | None = None) -> None:
        super().__init__(backend, message)
        self.retry_after = retry_after


class AnalysisTimeoutError(AnalysisError):
    """Backend request timed out."""


class AnalysisPipelineError(LensError):
    """The mock fallback failed; no analysis could be produced.

    This is the one case where interception changes the caller-visible
    outcome of the wrapped call: this error is raised instead of the
    original one, which is kept on ``original_error``.
    """

    def __init__(self, message: str, original_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error
