"""Concrete implementations of provider and subscriber interfaces."""

from .llm import (
    AnthropicProvider,
    GroqProvider,
    HuggingFaceProvider,
    MockProvider,
    OpenAIProvider,
    PaLMProvider,
)
from .subscribers.websocket import WebSocketSubscriber

__all__ = [
    "AnthropicProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "MockProvider",
    "OpenAIProvider",
    "PaLMProvider",
    "WebSocketSubscriber",
]
