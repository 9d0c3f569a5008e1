"""Deterministic mock provider.

Never performs I/O and never fails, which makes it both the default
provider and the analyzer's fallback when a real backend is unavailable.
"""

from __future__ import annotations

MOCK_PROVIDER_NAME = "mock"
MOCK_MARKER = "Mock Analysis:"


class MockProvider:
    """Provider that echoes the prompt inside a fixed template."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        # Same signature as the real providers so the registry can build it
        self._model = model or MOCK_PROVIDER_NAME

    @property
    def name(self) -> str:
        return MOCK_PROVIDER_NAME

    @property
    def model_name(self) -> str:
        return self._model

    async def analyze(self, prompt: str) -> str:
        return f'{MOCK_MARKER} This is a simulated response for the prompt "{prompt}"'
