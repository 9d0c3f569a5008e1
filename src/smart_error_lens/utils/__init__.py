"""Utility functions and helpers.

- errors: Exception hierarchy for the analysis pipeline
- logging: Structured logging with secret sanitization
- security: Secret redaction
"""

from smart_error_lens.utils.errors import (
    AnalysisError,
    AnalysisPipelineError,
    AnalysisTimeoutError,
    ConfigError,
    ConfigErrorKind,
    LensError,
    RateLimitError,
)
from smart_error_lens.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from smart_error_lens.utils.security import RedactionError, SecretRedactor, SecurityError

__all__ = [
    # Errors
    "AnalysisError",
    "AnalysisPipelineError",
    "AnalysisTimeoutError",
    "ConfigError",
    "ConfigErrorKind",
    "LensError",
    "RateLimitError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "bind_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
]
