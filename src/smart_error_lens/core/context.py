"""Capture diagnostic facts from a failing call.

Turns an exception and the call that raised it into the immutable
``ErrorFacts`` and ``InvocationContext`` consumed by the analyzer.
Source capture is best-effort: callables without retrievable source
(builtins, lambdas defined in a REPL, C extensions) simply produce a
context without a snippet.
"""

from __future__ import annotations

import inspect
import sys
import textwrap
import traceback
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import structlog

from smart_error_lens.models.report import ErrorFacts, InvocationContext

log = structlog.get_logger()

# Cap on captured source so a huge function doesn't dominate the prompt
MAX_SOURCE_CHARS = 4000


def build_error_facts(error: BaseException, collect_stack_trace: bool = True) -> ErrorFacts:
    """Snapshot an exception's type, message and (optionally) stack trace.

    Args:
        error: The exception raised by the unit of work.
        collect_stack_trace: When False the stack trace is left empty,
            whatever the exception carries.
    """
    stack_trace = ""
    if collect_stack_trace:
        stack_trace = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ).rstrip()

    return ErrorFacts(
        type=type(error).__name__,
        message=str(error),
        stack_trace=stack_trace,
    )


def _split_qualname(func: Callable[..., Any]) -> tuple[str, str]:
    """Return (owner, method) for a callable.

    ``Calculator.divide`` → ("Calculator", "divide"). Module-level and
    nested functions are owned by their module.
    """
    qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if qualname is None:
        return type(func).__name__, "__call__"

    owner, _, method = qualname.rpartition(".")
    if not owner or owner.endswith("<locals>"):
        return getattr(func, "__module__", None) or "<unknown>", method
    return owner.rpartition(".")[2], method


_MISSING = object()


def _class_attribute(func: Callable[..., Any]) -> Any:
    """Look up the raw class attribute ``func`` was defined as.

    Returns ``_MISSING`` when the defining class can't be reached from the
    module namespace (classes defined inside functions, for instance).
    """
    owner_path, _, name = func.__qualname__.rpartition(".")
    if not owner_path or "<locals>" in owner_path:
        return _MISSING

    target: Any = sys.modules.get(func.__module__)
    for part in owner_path.split("."):
        target = getattr(target, part, None)
    if not inspect.isclass(target):
        return _MISSING
    return inspect.getattr_static(target, name, _MISSING)


def has_receiver(func: Callable[..., Any]) -> bool:
    """Whether calls to ``func`` pass ``self`` / ``cls`` as the first argument.

    Bound methods already carry their receiver, and static methods and
    module-level functions never take one. A plain function defined in a
    class body (an undecorated method, a classmethod's ``__func__``, or a
    method decorated inside the class) does.
    """
    if inspect.ismethod(func):
        return False

    target = inspect.unwrap(func)
    qualname = getattr(target, "__qualname__", "")
    owner, _, _ = qualname.rpartition(".")
    if not owner or owner.endswith("<locals>"):
        return False

    attribute = _class_attribute(target)
    if isinstance(attribute, staticmethod):
        return False
    if attribute is not _MISSING:
        return True

    # Class not importable: fall back to the receiver naming convention
    try:
        parameters = list(inspect.signature(target).parameters)
    except (TypeError, ValueError):
        return False
    return bool(parameters) and parameters[0] in ("self", "cls")


def get_source_snippet(func: Callable[..., Any]) -> str | None:
    """Return the dedented source of ``func``, or None if unavailable."""
    try:
        source = inspect.getsource(inspect.unwrap(func))
    except (OSError, TypeError) as e:
        log.debug("source_unavailable", function=getattr(func, "__qualname__", repr(func)), error=str(e))
        return None

    source = textwrap.dedent(source).strip()
    if len(source) > MAX_SOURCE_CHARS:
        source = source[:MAX_SOURCE_CHARS] + "\n# ... (truncated)"
    return source or None


def build_invocation_context(
    func: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
    include_source: bool = True,
    receiver: bool | None = None,
) -> InvocationContext:
    """Describe the failing call.

    Args:
        func: The wrapped unit of work.
        args: Positional arguments it was called with.
        kwargs: Keyword arguments it was called with.
        include_source: Whether to try capturing the function's source.
        receiver: Whether ``args[0]`` is ``self`` / ``cls`` and should be
            left out. Inferred with ``has_receiver`` when None.
    """
    owner, method = _split_qualname(func)
    if receiver is None:
        receiver = has_receiver(func)
    return InvocationContext(
        owner_name=owner,
        method_name=method,
        arguments=tuple(args[1:]) if receiver and args else tuple(args),
        keyword_arguments=tuple((kwargs or {}).items()),
        source_snippet=get_source_snippet(func) if include_source else None,
    )
