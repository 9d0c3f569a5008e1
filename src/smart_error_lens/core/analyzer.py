"""Analyzer: prompt rendering, provider call and mock fallback.

Given captured error facts and an invocation context, the analyzer renders
the prompt, asks the active provider for an analysis and assembles the
``AnalysisReport``. A provider failure is logged and answered by exactly one
call to a freshly built mock provider; the failing provider is not retried.
Only a failure of that mock call escapes, as ``AnalysisPipelineError``.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from smart_error_lens.adapters.llm.mock import MOCK_PROVIDER_NAME, MockProvider
from smart_error_lens.core.config_store import ConfigSnapshot, ConfigStore, get_store
from smart_error_lens.core.prompt import render_prompt
from smart_error_lens.interfaces.provider import AnalysisProvider
from smart_error_lens.models.report import AnalysisReport, ErrorFacts, InvocationContext
from smart_error_lens.utils.errors import AnalysisError, AnalysisPipelineError
from smart_error_lens.utils.logging import LogEventNames
from smart_error_lens.utils.security import RedactionError, SecretRedactor

log = structlog.get_logger()


class Analyzer:
    """Turns a captured failure into an ``AnalysisReport``.

    The provider is read from the configuration store once, at the start of
    each ``analyze`` call. No lock is held while the provider is awaited.

    Example:
        analyzer = Analyzer()
        report = await analyzer.analyze(facts, context)
        print(report.analysis)
    """

    def __init__(
        self,
        store: ConfigStore | None = None,
        redactor: SecretRedactor | None = None,
        fallback_factory: Callable[[], AnalysisProvider] = MockProvider,
    ) -> None:
        """Initialize the analyzer.

        Args:
            store: Configuration store. Defaults to the process-wide store.
            redactor: Secret redactor applied before real backends are called.
            fallback_factory: Builds the provider used when the active one fails.
        """
        self._store = store
        self._redactor = redactor or SecretRedactor()
        self._fallback_factory = fallback_factory

    @property
    def store(self) -> ConfigStore:
        return self._store or get_store()

    def _prepare_prompt(self, prompt: str, provider: AnalysisProvider) -> str:
        """Redact secrets before a prompt leaves the process."""
        if provider.name == MOCK_PROVIDER_NAME:
            return prompt
        try:
            return self._redactor.redact(prompt)
        except RedactionError as e:
            raise AnalysisError(provider.name, f"Cannot send prompt: redaction failed: {e}") from e

    async def analyze(
        self,
        facts: ErrorFacts,
        context: InvocationContext,
        snapshot: ConfigSnapshot | None = None,
    ) -> AnalysisReport:
        """Produce the report for one failure.

        Args:
            facts: Captured error facts.
            context: The failing call.
            snapshot: Configuration to use. Defaults to the store's current one.

        Returns:
            A report whose ``analysis`` is never empty.

        Raises:
            AnalysisPipelineError: If the mock fallback itself failed.
        """
        if snapshot is None:
            snapshot = self.store.snapshot()
        provider = snapshot.provider
        prompt = render_prompt(facts, context, snapshot.config.custom_prompt)

        log.info(
            LogEventNames.ANALYSIS_STARTED,
            provider=provider.name,
            method=context.qualified_method,
            error_type=facts.type,
        )
        started = time.perf_counter()

        try:
            analysis = await provider.analyze(self._prepare_prompt(prompt, provider))
            if not analysis or not analysis.strip():
                raise AnalysisError(provider.name, f"{provider.name} returned an empty analysis")
        except Exception as e:
            log.warning(
                LogEventNames.PROVIDER_ANALYSIS_FAILED,
                provider=provider.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            analysis = await self._fallback(prompt)
            log.info(LogEventNames.ANALYSIS_FALLBACK_USED, failed_provider=provider.name)
            return self._report(facts, context, analysis, MOCK_PROVIDER_NAME, True, started)

        return self._report(facts, context, analysis, provider.name, False, started)

    async def _fallback(self, prompt: str) -> str:
        """Ask a fresh mock provider, never the shared instance."""
        try:
            analysis = await self._fallback_factory().analyze(prompt)
        except Exception as e:
            log.error(LogEventNames.ANALYSIS_PIPELINE_FAILED, error_type=type(e).__name__, error=str(e))
            raise AnalysisPipelineError(f"Fallback analysis failed: {e}") from e

        if not analysis:
            log.error(LogEventNames.ANALYSIS_PIPELINE_FAILED, error="empty fallback analysis")
            raise AnalysisPipelineError("Fallback analysis returned nothing")
        return analysis

    def _report(
        self,
        facts: ErrorFacts,
        context: InvocationContext,
        analysis: str,
        provider_name: str,
        fallback: bool,
        started: float,
    ) -> AnalysisReport:
        log.info(
            LogEventNames.ANALYSIS_COMPLETED,
            provider=provider_name,
            fallback=fallback,
            method=context.qualified_method,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return AnalysisReport(
            error=facts,
            analysis=analysis,
            context=context,
            provider=provider_name,
            fallback=fallback,
        )
