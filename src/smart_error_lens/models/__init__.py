"""Data models and transfer objects."""

from .report import AnalysisReport, ErrorFacts, InvocationContext

__all__ = [
    "AnalysisReport",
    "ErrorFacts",
    "InvocationContext",
]
