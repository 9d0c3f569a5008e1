"""Interception of failing calls.

``smart_error`` wraps a unit of work. When the work succeeds its result is
returned untouched. When it raises, the failure is captured, analyzed,
broadcast and handed to the optional ``on_report`` callback, and then the
original exception is re-raised unchanged.

The single exception to that rule: if the analysis pipeline fails fatally
(the mock fallback itself broke), ``AnalysisPipelineError`` is raised in
place of the original error, which is attached as ``original_error`` and
chained as ``__context__``.

Both ``def`` and ``async def`` callables are supported. For synchronous
callables the analysis runs to completion on a private event loop before
the original error propagates.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, ParamSpec, TypeVar, overload

import structlog

from smart_error_lens.core.analyzer import Analyzer
from smart_error_lens.core.broadcaster import Broadcaster, get_broadcaster
from smart_error_lens.core.context import build_error_facts, build_invocation_context
from smart_error_lens.models.report import AnalysisReport
from smart_error_lens.utils.errors import AnalysisPipelineError
from smart_error_lens.utils.logging import LogEventNames, bind_context, unbind_context

log = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")

ReportCallback = Callable[[AnalysisReport], Any]


def run_blocking(coro: Any) -> Any:
    """Run a coroutine to completion from synchronous code.

    Uses ``asyncio.run`` directly when this thread has no running loop,
    otherwise a one-off worker thread with its own loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="smart-error-lens") as executor:
        return executor.submit(asyncio.run, coro).result()


class Interceptor:
    """Observes failures of wrapped callables without changing their outcome.

    Args:
        analyzer: Analyzer to use. Defaults to one bound to the global store.
        broadcaster: Broadcaster to publish reports to. Defaults to the
            process-wide broadcaster.
        on_report: Called with each report after it is broadcast.
        overrides: Per-call configuration merged over the store's current
            config (e.g. ``mock_mode=True`` or ``collect_stack_trace=False``).
    """

    def __init__(
        self,
        analyzer: Analyzer | None = None,
        broadcaster: Broadcaster | None = None,
        on_report: ReportCallback | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self._analyzer = analyzer or Analyzer()
        self._broadcaster = broadcaster
        self._on_report = on_report
        self._overrides = dict(overrides or {})

    @property
    def broadcaster(self) -> Broadcaster:
        return self._broadcaster or get_broadcaster()

    def wrap(self, func: Callable[P, T]) -> Callable[P, T]:
        """Return an instrumented version of ``func`` with the same signature."""
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    report = await self._capture(func, exc, args, kwargs)
                    await self._emit_async(report)
                    raise

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                report = run_blocking(self._capture(func, exc, args, kwargs))
                self._emit(report)
                raise

        return sync_wrapper

    async def _capture(
        self,
        func: Callable[..., Any],
        exc: Exception,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
    ) -> AnalysisReport:
        """Build the context and run the analyzer for one failure."""
        snapshot = self._analyzer.store.derive(self._overrides)
        facts = build_error_facts(exc, snapshot.config.collect_stack_trace)
        context = build_invocation_context(func, args, kwargs)

        # Every log line of this analysis carries the intercepted method
        bind_context(intercepted_method=context.qualified_method)
        log.info(LogEventNames.CALL_INTERCEPTED, error_type=facts.type)

        try:
            return await self._analyzer.analyze(facts, context, snapshot)
        except AnalysisPipelineError as fatal:
            fatal.original_error = exc
            log.error(
                LogEventNames.ANALYSIS_PIPELINE_FAILED,
                original_error_type=facts.type,
                error=str(fatal),
            )
            raise
        finally:
            unbind_context("intercepted_method")

    def _publish(self, report: AnalysisReport) -> Any:
        """Broadcast the report, then hand it to the callback."""
        try:
            self.broadcaster.broadcast(report)
        except Exception as e:
            log.warning(LogEventNames.REPORT_BROADCAST_FAILED, error_type=type(e).__name__, error=str(e))

        if self._on_report is None:
            return None
        try:
            return self._on_report(report)
        except Exception as e:
            log.warning(LogEventNames.REPORT_CALLBACK_FAILED, error_type=type(e).__name__, error=str(e))
            return None

    def _emit(self, report: AnalysisReport) -> None:
        result = self._publish(report)
        if inspect.isawaitable(result):
            try:
                run_blocking(result)
            except Exception as e:
                log.warning(LogEventNames.REPORT_CALLBACK_FAILED, error_type=type(e).__name__, error=str(e))

    async def _emit_async(self, report: AnalysisReport) -> None:
        result = self._publish(report)
        if inspect.isawaitable(result):
            try:
                await result
            except Exception as e:
                log.warning(LogEventNames.REPORT_CALLBACK_FAILED, error_type=type(e).__name__, error=str(e))


@overload
def smart_error(func: Callable[P, T], /) -> Callable[P, T]: ...


@overload
def smart_error(
    func: None = None,
    /,
    *,
    on_report: ReportCallback | None = ...,
    broadcaster: Broadcaster | None = ...,
    analyzer: Analyzer | None = ...,
    **overrides: Any,
) -> Callable[[Callable[P, T]], Callable[P, T]]: ...


def smart_error(
    func: Callable[..., Any] | None = None,
    /,
    *,
    on_report: ReportCallback | None = None,
    broadcaster: Broadcaster | None = None,
    analyzer: Analyzer | None = None,
    **overrides: Any,
) -> Any:
    """Wrap a unit of work so its failures are analyzed and broadcast.

    Usable as a plain wrapping call or as a decorator, with or without
    options:

        safe_divide = smart_error(divide)

        @smart_error
        def parse(raw): ...

        @smart_error(on_report=reports.append, mock_mode=True)
        async def fetch(url): ...

    Args:
        func: The callable to wrap.
        on_report: Called with each ``AnalysisReport`` (may be async).
        broadcaster: Broadcaster to publish to. Defaults to the global one.
        analyzer: Analyzer to use. Defaults to one bound to the global store.
        **overrides: Per-call config overrides, using ``ProviderConfig``
            field names or their camelCase aliases.

    Returns:
        The wrapped callable, or a decorator when ``func`` is omitted.
    """
    interceptor = Interceptor(
        analyzer=analyzer,
        broadcaster=broadcaster,
        on_report=on_report,
        overrides=overrides,
    )
    if func is not None:
        return interceptor.wrap(func)
    return interceptor.wrap
