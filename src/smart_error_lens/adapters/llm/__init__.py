"""Analysis backend providers."""

from .anthropic import AnthropicProvider
from .groq import GroqProvider
from .huggingface import HuggingFaceProvider
from .mock import MOCK_MARKER, MOCK_PROVIDER_NAME, MockProvider
from .openai import OpenAIProvider
from .palm import PaLMProvider

__all__ = [
    "MOCK_MARKER",
    "MOCK_PROVIDER_NAME",
    "AnthropicProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "MockProvider",
    "OpenAIProvider",
    "PaLMProvider",
]
