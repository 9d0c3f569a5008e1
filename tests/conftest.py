"""Shared test fixtures for Smart Error Lens."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from smart_error_lens.core.broadcaster import Broadcaster
from smart_error_lens.core.config_store import ConfigStore, get_store
from smart_error_lens.models.report import AnalysisReport, ErrorFacts, InvocationContext


class FakeSubscriber:
    """In-memory subscriber recording every message it is sent."""

    def __init__(self, ready: bool = True) -> None:
        self.ready = ready
        self.messages: list[str] = []

    @property
    def is_ready(self) -> bool:
        return self.ready

    def send(self, message: str) -> None:
        self.messages.append(message)


class FailingProvider:
    """Provider whose every call raises the given exception."""

    def __init__(self, error: Exception, name: str = "openai") -> None:
        self._error = error
        self._name = name
        self.calls = 0
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def model_name(self) -> str:
        return "failing-model"

    async def analyze(self, prompt: str) -> str:
        self.calls += 1
        self.prompts.append(prompt)
        raise self._error


class RecordingProvider:
    """Provider that returns a fixed answer and records prompts."""

    def __init__(self, answer: str = "Root cause: division by zero", name: str = "openai") -> None:
        self._answer = answer
        self._name = name
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def model_name(self) -> str:
        return "recording-model"

    async def analyze(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._answer


@pytest.fixture(autouse=True)
def reset_global_store() -> Iterator[None]:
    """Keep the process-wide store in default mock mode between tests."""
    get_store().reset()
    yield
    get_store().reset()


@pytest.fixture
def store() -> ConfigStore:
    """Return an isolated configuration store."""
    return ConfigStore()


@pytest.fixture
def broadcaster() -> Broadcaster:
    """Return an isolated broadcaster."""
    return Broadcaster()


@pytest.fixture
def error_facts() -> ErrorFacts:
    """Return sample error facts."""
    return ErrorFacts(
        type="ZeroDivisionError",
        message="division by zero",
        stack_trace='Traceback (most recent call last):\n  File "calc.py", line 3, in divide\nZeroDivisionError: division by zero',
    )


@pytest.fixture
def invocation_context() -> InvocationContext:
    """Return a sample invocation context."""
    return InvocationContext(
        owner_name="Calculator",
        method_name="divide",
        arguments=(10, 0),
        source_snippet="def divide(self, a, b):\n    return a / b",
    )


@pytest.fixture
def sample_report(error_facts: ErrorFacts, invocation_context: InvocationContext) -> AnalysisReport:
    """Return a sample analysis report."""
    return AnalysisReport(
        error=error_facts,
        analysis="Mock Analysis: sample",
        context=invocation_context,
        provider="mock",
    )


@pytest.fixture
def subscriber_cls() -> type[FakeSubscriber]:
    """Return the in-memory subscriber class."""
    return FakeSubscriber


@pytest.fixture
def failing_provider_cls() -> type[FailingProvider]:
    """Return the always-failing provider class."""
    return FailingProvider


@pytest.fixture
def recording_provider_cls() -> type[RecordingProvider]:
    """Return the recording provider class."""
    return RecordingProvider
