"""Abstract interface for analysis backends."""

from typing import Protocol


class AnalysisProvider(Protocol):
    """Contract every analysis backend implements.

    Each concrete provider (mock, OpenAI, Anthropic, Groq, HuggingFace,
    PaLM) turns a rendered prompt into a natural-language analysis by
    delegating to one external API.
    """

    async def analyze(self, prompt: str) -> str:
        """
        Produce an analysis for the given prompt.

        Implementations must never report failure as an empty string.

        Args:
            prompt: Fully rendered prompt text

        Returns:
            Non-empty analysis text

        Raises:
            AnalysisError: On network, authentication or malformed-response
                conditions
            RateLimitError: If the backend rate limit was exceeded
            AnalysisTimeoutError: If the request timed out
        """
        ...

    @property
    def name(self) -> str:
        """
        Return the registry name of this provider.

        Examples:
            - "mock"
            - "openai"
            - "anthropic"
        """
        ...

    @property
    def model_name(self) -> str:
        """Return the model identifier being used."""
        ...
