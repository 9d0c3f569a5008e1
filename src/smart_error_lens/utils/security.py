"""Secret redaction for prompts and log output.

Intercepted calls carry arbitrary arguments and stack traces, either of
which may hold credentials. Everything that leaves the process for a real
backend, and everything written to the log, goes through ``SecretRedactor``
first. Redaction fails closed: a pattern error raises instead of letting the
text through.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


class SecretRedactor:
    """Detects and redacts secrets from text.

    Usage:
        redactor = SecretRedactor()
        safe_text = redactor.redact(prompt)

    Attributes:
        placeholder: The string secrets are replaced with.
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        # LLM backends
        (r"sk-ant-[\w-]{20,}", "Anthropic API key"),
        (r"sk-proj-[a-zA-Z0-9_-]{20,}", "OpenAI project API key"),
        (r"sk-[a-zA-Z0-9]{32,}", "OpenAI API key"),
        (r"gsk_[a-zA-Z0-9]{20,}", "Groq API key"),
        (r"hf_[a-zA-Z0-9]{30,}", "HuggingFace token"),
        (r"AIza[0-9A-Za-z\-_]{35}", "Google API key"),
        # Cloud and infrastructure
        (r"AKIA[0-9A-Z]{16}", "AWS access key ID"),
        (r"ghp_[a-zA-Z0-9]{36}", "GitHub PAT"),
        (r"xox[baprs]-[\w-]+", "Slack token"),
        (
            r"(?i)(postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis|amqp)://[^:\s]+:[^@\s]+@[^\s]+",
            "Database connection string",
        ),
        (
            r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----",
            "Private key header",
        ),
        (r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*", "JWT token"),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Compile the redaction patterns.

        Args:
            placeholder: String to replace detected secrets with.
            custom_patterns: Additional (pattern, name) tuples to detect.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._pattern_names: dict[re.Pattern[str], str] = {}

        all_patterns = list(self.DEFAULT_PATTERNS)
        if custom_patterns:
            all_patterns.extend(custom_patterns)

        for pattern_str, name in all_patterns:
            try:
                self._pattern_names[re.compile(pattern_str)] = name
            except re.error as e:
                log.error("pattern_compilation_failed", pattern_name=name, error=str(e))
                raise RedactionError(f"Failed to compile secret pattern {name!r}: {e}") from e

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        """Return the compiled patterns."""
        return list(self._pattern_names)

    def redact(self, text: str) -> str:
        """Replace every detected secret in ``text`` with the placeholder.

        Raises:
            RedactionError: If a pattern fails while matching.
        """
        if not text:
            return text

        try:
            result = text
            for pattern in self._pattern_names:
                result = pattern.sub(self.placeholder, result)
            return result
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e

    def has_secrets(self, text: str) -> bool:
        """Check whether ``text`` contains anything that would be redacted."""
        if not text:
            return False
        return any(pattern.search(text) for pattern in self._pattern_names)
