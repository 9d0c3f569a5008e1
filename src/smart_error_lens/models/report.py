"""Data models for captured failures and their analysis reports."""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorFacts:
    """Snapshot of a failure taken at capture time."""

    type: str  # e.g., "ZeroDivisionError"
    message: str
    stack_trace: str = ""  # Empty when stack collection is disabled

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "message": self.message, "stack": self.stack_trace}


@dataclass(frozen=True)
class InvocationContext:
    """Where a failure happened and what the failing call was given."""

    owner_name: str  # Class name, or module name for plain functions
    method_name: str
    arguments: tuple[Any, ...] = ()
    keyword_arguments: tuple[tuple[str, Any], ...] = ()
    source_snippet: str | None = None

    @property
    def qualified_method(self) -> str:
        """Method name qualified by its owner, e.g. ``Calculator.divide``."""
        return f"{self.owner_name}.{self.method_name}"


@dataclass(frozen=True)
class AnalysisReport:
    """Result of analyzing one failing call."""

    error: ErrorFacts
    analysis: str
    context: InvocationContext
    provider: str  # Backend that produced ``analysis``
    fallback: bool = False  # True when the mock fallback replaced the backend

    def to_dict(self) -> dict[str, Any]:
        """Build the broadcast wire object."""
        return {
            "error": self.error.to_dict(),
            "analysis": self.analysis,
            "context": {
                "method": self.context.qualified_method,
                "arguments": list(self.context.arguments),
                "keywordArguments": dict(self.context.keyword_arguments),
                "source": self.context.source_snippet,
            },
            "provider": self.provider,
            "fallback": self.fallback,
        }

    def to_json(self) -> str:
        """Serialize the report; values JSON can't encode are sent as ``repr()``."""
        return json.dumps(self.to_dict(), default=repr)
