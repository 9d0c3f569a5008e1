"""Core pipeline components.

- ConfigStore: process-wide provider configuration
- Analyzer: prompt rendering, provider call and mock fallback
- Broadcaster: best-effort multicast of reports to subscribers
- Interceptor / smart_error: wraps callables and drives the pipeline on failure
"""

from smart_error_lens.core.analyzer import Analyzer
from smart_error_lens.core.broadcaster import Broadcaster, get_broadcaster
from smart_error_lens.core.config_store import (
    ConfigSnapshot,
    ConfigStore,
    configure,
    get_store,
    reset,
)
from smart_error_lens.core.context import build_error_facts, build_invocation_context
from smart_error_lens.core.interceptor import Interceptor, smart_error
from smart_error_lens.core.prompt import render_prompt
from smart_error_lens.core.registry import PROVIDERS, available_providers, create_provider

__all__ = [
    "PROVIDERS",
    "Analyzer",
    "Broadcaster",
    "ConfigSnapshot",
    "ConfigStore",
    "Interceptor",
    "available_providers",
    "build_error_facts",
    "build_invocation_context",
    "configure",
    "create_provider",
    "get_broadcaster",
    "get_store",
    "render_prompt",
    "reset",
    "smart_error",
]
