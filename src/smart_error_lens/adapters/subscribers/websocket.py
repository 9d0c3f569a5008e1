"""WebSocket subscriber for the report broadcaster.

Wraps a FastAPI ``WebSocket`` so it satisfies the ``Subscriber``
protocol. Broadcasts can originate on any thread (a failing synchronous
call analyzed on a worker thread, for instance), so ``send`` hands the
write to the loop that owns the socket and returns immediately.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Future

import structlog
from fastapi.websockets import WebSocket, WebSocketState

from ...utils.logging import LogEventNames

log = structlog.get_logger()


class WebSocketSubscriber:
    """A connected WebSocket client receiving analysis reports."""

    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop) -> None:
        """Initialize the subscriber.

        Args:
            websocket: An accepted WebSocket connection.
            loop: The event loop serving ``websocket``.
        """
        self._websocket = websocket
        self._loop = loop

    @property
    def is_ready(self) -> bool:
        return (
            not self._loop.is_closed()
            and self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    def send(self, message: str) -> None:
        future = asyncio.run_coroutine_threadsafe(
            self._websocket.send_text(message), self._loop
        )
        future.add_done_callback(self._log_send_failure)

    @staticmethod
    def _log_send_failure(future: Future[None]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            log.warning(
                LogEventNames.SUBSCRIBER_SEND_FAILED,
                error_type=type(error).__name__,
                error=str(error),
            )
