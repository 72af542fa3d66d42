from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .message import QueueMessage


@runtime_checkable
class IQueueService(Protocol):
    """
    Port for the point-to-point queue service (SQS, in-memory, …).

    Transport packages provide concrete adapters. Failures are raised as
    ``TransportError``.
    """

    async def receive(
        self,
        queue: str,
        wait_time_seconds: int,
        max_messages: int,
    ) -> list[QueueMessage]:
        """
        Long-poll *queue* for up to *max_messages* messages, all attributes included.
        """
        ...

    async def delete(self, queue: str, receipt_handle: str) -> None:
        """
        Acknowledge a received message so it is not redelivered.
        """
        ...

    async def send(self, queue: str, body: str, attributes: dict[str, str]) -> str:
        """
        Send *body* to *queue* with string *attributes*.

        Returns:
            The transport's delivery id.
        """
        ...
