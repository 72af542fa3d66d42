"""InMemoryQueueService — IQueueService for tests and local development."""

from __future__ import annotations

import uuid
from collections import deque

from ..exceptions import TransportError
from ..message import QueueMessage


class InMemoryQueueService:
    """In-memory queue service with assertion helpers for tests.

    ``receive`` never waits: it hands out up to ``max_messages`` pending
    messages and keeps them in flight until ``delete``. In-flight messages
    that were never deleted go back to the queue on ``release_in_flight()``,
    mimicking an expired visibility timeout.
    """

    def __init__(self) -> None:
        self._pending: dict[str, deque[QueueMessage]] = {}
        self._in_flight: dict[str, dict[str, QueueMessage]] = {}
        self._sent: list[tuple[str, str, dict[str, str]]] = []
        self._deleted: list[tuple[str, QueueMessage]] = []

    async def receive(
        self,
        queue: str,
        wait_time_seconds: int,  # noqa: ARG002
        max_messages: int,
    ) -> list[QueueMessage]:
        """Return up to *max_messages* pending messages in FIFO order."""
        pending = self._pending.get(queue)
        received: list[QueueMessage] = []
        while pending and len(received) < max_messages:
            message = pending.popleft().model_copy(
                update={"receipt_handle": str(uuid.uuid4())}
            )
            self._in_flight.setdefault(queue, {})[message.receipt_handle] = message
            received.append(message)
        return received

    async def delete(self, queue: str, receipt_handle: str) -> None:
        """Acknowledge an in-flight message."""
        message = self._in_flight.get(queue, {}).pop(receipt_handle, None)
        if message is None:
            raise TransportError(
                f"Unknown receipt handle {receipt_handle!r}",
                operation="delete",
                queue=queue,
            )
        self._deleted.append((queue, message))

    async def send(self, queue: str, body: str, attributes: dict[str, str]) -> str:
        """Enqueue *body*; return the generated message id."""
        message_id = str(uuid.uuid4())
        self._sent.append((queue, body, dict(attributes)))
        self._pending.setdefault(queue, deque()).append(
            QueueMessage(body=body, message_id=message_id, attributes=attributes)
        )
        return message_id

    def release_in_flight(self, queue: str | None = None) -> None:
        """Return undeleted in-flight messages to the front of their queue."""
        queues = [queue] if queue is not None else list(self._in_flight)
        for name in queues:
            in_flight = self._in_flight.pop(name, {})
            self._pending.setdefault(name, deque()).extendleft(
                reversed(list(in_flight.values()))
            )

    def sent(self, queue: str | None = None) -> list[tuple[str, str, dict[str, str]]]:
        """Return (queue, body, attributes) for every send, optionally filtered."""
        return [s for s in self._sent if queue is None or s[0] == queue]

    def pending(self, queue: str) -> list[QueueMessage]:
        """Messages waiting to be received."""
        return list(self._pending.get(queue, ()))

    def in_flight(self, queue: str) -> list[QueueMessage]:
        """Messages received but not yet deleted."""
        return list(self._in_flight.get(queue, {}).values())

    def deleted(self, queue: str) -> list[QueueMessage]:
        """Messages acknowledged on *queue*, in deletion order."""
        return [m for q, m in self._deleted if q == queue]
