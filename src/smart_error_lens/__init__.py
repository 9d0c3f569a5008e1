"""Smart Error Lens: AI root-cause analysis for failing calls.

Wrap a function with ``smart_error``; when it raises, the failure is
analyzed by the configured backend, broadcast to live subscribers and then
re-raised unchanged.
"""

from smart_error_lens.core import (
    Analyzer,
    Broadcaster,
    configure,
    get_broadcaster,
    get_store,
    reset,
    smart_error,
)
from smart_error_lens.models import AnalysisReport, ErrorFacts, InvocationContext
from smart_error_lens.utils.errors import (
    AnalysisError,
    AnalysisPipelineError,
    ConfigError,
    ConfigErrorKind,
)

__all__ = [
    "AnalysisError",
    "AnalysisPipelineError",
    "AnalysisReport",
    "Analyzer",
    "Broadcaster",
    "ConfigError",
    "ConfigErrorKind",
    "ErrorFacts",
    "InvocationContext",
    "configure",
    "get_broadcaster",
    "get_store",
    "reset",
    "smart_error",
]
