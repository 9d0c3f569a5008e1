"""Abstract interface for report subscribers."""

from typing import Protocol


class Subscriber(Protocol):
    """A live connection that wants to receive analysis reports.

    The serving layer wraps each connection (e.g. a WebSocket) in an object
    satisfying this protocol and registers it with the ``Broadcaster``.
    """

    @property
    def is_ready(self) -> bool:
        """
        Return True if the connection is open and can accept a message.

        Subscribers that are not ready are skipped by a broadcast; nothing
        is buffered for them.
        """
        ...

    def send(self, message: str) -> None:
        """
        Hand a serialized report to the connection.

        Must not block on delivery: implementations schedule the actual
        write and return immediately.

        Args:
            message: JSON-encoded ``AnalysisReport``
        """
        ...
