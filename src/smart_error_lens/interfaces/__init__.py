"""Protocol definitions for pluggable adapters."""

from .provider import AnalysisProvider
from .subscriber import Subscriber

__all__ = ["AnalysisProvider", "Subscriber"]
