"""SQSQueueService — IQueueService over aiobotocore."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import TransportError
from ..message import QueueMessage, string_attribute

if TYPE_CHECKING:
    from .connection import SQSConnectionManager

logger = logging.getLogger("sqs_message_bus.sqs")

# SQS accepts MaxNumberOfMessages between 1 and 10.
SQS_MAX_MESSAGES = 10


class SQSQueueService:
    """SQS adapter implementing IQueueService.

    Queues may be given as URLs or names; names are resolved (and cached)
    through the connection manager. Every client failure is raised as
    TransportError with the original exception chained.
    """

    def __init__(self, connection: SQSConnectionManager) -> None:
        """Requires a shared connection manager."""
        self._connection = connection

    async def receive(
        self,
        queue: str,
        wait_time_seconds: int,
        max_messages: int,
    ) -> list[QueueMessage]:
        """Long-poll for messages, requesting all system and message attributes."""
        queue_url = await self._connection.get_queue_url(queue)
        client = await self._connection.get_client()
        try:
            out = await client.receive_message(
                QueueUrl=queue_url,
                WaitTimeSeconds=wait_time_seconds,
                MaxNumberOfMessages=max(1, min(max_messages, SQS_MAX_MESSAGES)),
                AttributeNames=["All"],
                MessageAttributeNames=["All"],
            )
        except Exception as e:
            raise TransportError(str(e), operation="receive", queue=queue) from e
        messages = [QueueMessage.from_sqs(raw) for raw in out.get("Messages", [])]
        logger.debug("Received %d message(s) from %s", len(messages), queue)
        return messages

    async def delete(self, queue: str, receipt_handle: str) -> None:
        """Delete a received message by receipt handle."""
        queue_url = await self._connection.get_queue_url(queue)
        client = await self._connection.get_client()
        try:
            await client.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle,
            )
        except Exception as e:
            raise TransportError(str(e), operation="delete", queue=queue) from e

    async def send(self, queue: str, body: str, attributes: dict[str, str]) -> str:
        """Send *body* with String message attributes; return the MessageId."""
        queue_url = await self._connection.get_queue_url(queue)
        client = await self._connection.get_client()
        send_kwargs: dict[str, Any] = {
            "QueueUrl": queue_url,
            "MessageBody": body,
            "MessageAttributes": {
                name: string_attribute(value) for name, value in attributes.items()
            },
        }
        try:
            out = await client.send_message(**send_kwargs)
        except Exception as e:
            raise TransportError(str(e), operation="send", queue=queue) from e
        return str(out.get("MessageId", ""))

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()
