"""Publisher — send one message to one queue with correlation metadata."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .correlation import UUID4Generator
from .exceptions import ValidationError
from .log_context import MessageLogAdapter
from .message import CORRELATION_ID_ATTRIBUTE, REPLY_TO_ATTRIBUTE
from .serialization import MessageSerializer, is_empty_message

if TYPE_CHECKING:
    from .correlation import IIDGenerator
    from .params import PublishSpec
    from .ports import IQueueService

logger = logging.getLogger("sqs_message_bus.publisher")


def raise_if_cancelled(cancel_event: asyncio.Event | None) -> None:
    """Refuse to start a transport call once cancellation was requested."""
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("message bus operation cancelled")


class Publisher:
    """Sends messages through an IQueueService.

    Strings are sent verbatim; other values are JSON-encoded. The
    ``CorrelationId`` attribute is always set, ``ReplyTo`` only when the spec
    names a reply queue.
    """

    def __init__(
        self,
        queue_service: IQueueService,
        *,
        serializer: MessageSerializer | None = None,
        id_generator: IIDGenerator | None = None,
    ) -> None:
        """Configure publisher.

        Args:
            queue_service: Transport adapter used for ``send``.
            serializer: Encodes message bodies; default MessageSerializer().
            id_generator: Source of correlation IDs when the spec has none.
        """
        self._queue_service = queue_service
        self._serializer = serializer or MessageSerializer()
        self._id_generator = id_generator or UUID4Generator()

    async def send(
        self,
        message: Any,
        spec: PublishSpec,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Publish *message* to ``spec.queue``; return the correlation ID used.

        Raises:
            ValidationError: empty message or missing queue (nothing is sent).
            SerializationError: the message cannot be encoded.
            TransportError: the queue service rejected the send.
        """
        if is_empty_message(message):
            raise ValidationError({"message": ["message must not be empty"]})
        if spec is None:
            raise ValidationError({"spec": ["publish spec is required"]})
        spec.ensure_valid()

        correlation_id = spec.correlation_id or self._id_generator.next_id()
        log = MessageLogAdapter(logger, correlation_id, queue=spec.queue)

        body = self._serializer.encode(message)
        attributes = {CORRELATION_ID_ATTRIBUTE: correlation_id}
        if spec.reply_to and spec.reply_to.strip():
            attributes[REPLY_TO_ATTRIBUTE] = spec.reply_to

        raise_if_cancelled(cancel_event)
        message_id = await self._queue_service.send(spec.queue, body, attributes)

        log.info("Message sent to queue %s with id %s", spec.queue, message_id)
        return correlation_id
