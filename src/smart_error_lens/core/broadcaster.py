"""Best-effort multicast of analysis reports to live subscribers.

The subscriber set is guarded by a lock; a broadcast copies it under the
lock and iterates the copy without it, so connections may come and go
mid-broadcast. Delivery is fire-and-forget: subscribers that aren't ready
are skipped, a subscriber whose ``send`` raises is logged and skipped, and
nothing is queued or retried.
"""

from __future__ import annotations

import threading

import structlog

from smart_error_lens.interfaces.subscriber import Subscriber
from smart_error_lens.models.report import AnalysisReport
from smart_error_lens.utils.logging import LogEventNames

log = structlog.get_logger()


class Broadcaster:
    """Thread-safe registry of subscribers with snapshot-then-send broadcast.

    Example:
        broadcaster = Broadcaster()
        broadcaster.register(subscriber)
        broadcaster.broadcast(report)
        broadcaster.unregister(subscriber)  # from the connection's close handler
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: set[Subscriber] = set()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def register(self, subscriber: Subscriber) -> None:
        """Add a subscriber. Registering twice has no further effect."""
        with self._lock:
            self._subscribers.add(subscriber)
            count = len(self._subscribers)
        log.info(LogEventNames.SUBSCRIBER_REGISTERED, subscribers=count)

    def unregister(self, subscriber: Subscriber) -> bool:
        """Remove a subscriber.

        Returns:
            True if it was registered, False if it had already been removed.
        """
        with self._lock:
            present = subscriber in self._subscribers
            self._subscribers.discard(subscriber)
            count = len(self._subscribers)
        if present:
            log.info(LogEventNames.SUBSCRIBER_UNREGISTERED, subscribers=count)
        return present

    def broadcast(self, report: AnalysisReport) -> int:
        """Send ``report`` to every ready subscriber.

        Never raises because of a subscriber.

        Returns:
            Number of subscribers the message was handed to.
        """
        message = report.to_json()
        with self._lock:
            targets = tuple(self._subscribers)

        delivered = 0
        for subscriber in targets:
            try:
                if not subscriber.is_ready:
                    continue
                subscriber.send(message)
            except Exception as e:
                log.warning(
                    LogEventNames.SUBSCRIBER_SEND_FAILED,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                continue
            delivered += 1

        log.debug(
            LogEventNames.REPORT_BROADCAST,
            delivered=delivered,
            subscribers=len(targets),
            method=report.context.qualified_method,
        )
        return delivered


_broadcaster = Broadcaster()


def get_broadcaster() -> Broadcaster:
    """Return the process-wide broadcaster."""
    return _broadcaster
