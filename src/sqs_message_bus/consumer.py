"""Consumer — poll a queue and run the consume-dispatch-acknowledge pipeline."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .correlation import UUID4Generator, inject_correlation_id
from .exceptions import (
    BatchTransportError,
    DecodeError,
    HandlerError,
    SerializationError,
    TransportError,
    ValidationError,
    error_kind,
)
from .log_context import MessageLogAdapter
from .params import PublishSpec
from .publisher import Publisher, raise_if_cancelled
from .serialization import MessageSerializer, is_empty_message

if TYPE_CHECKING:
    import asyncio

    from .correlation import IIDGenerator
    from .message import QueueMessage
    from .params import ConsumeSpec
    from .ports import IQueueService

logger = logging.getLogger("sqs_message_bus.consumer")

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")

Handler = Callable[[RequestT], Awaitable[ResponseT | None] | ResponseT | None]


class Consumer(Generic[RequestT, ResponseT]):
    """Receives one batch per ``run`` call and processes it sequentially.

    For every message:

    1. Resolve correlation ID (``CorrelationId`` attribute, else generated) and
       reply-to (``ReplyTo`` attribute, else ``spec.reply_to``).
    2. Decode the body into ``request_type`` and inject the correlation ID.
    3. Invoke the handler.
    4. On success: delete the message, then publish a non-None response to
       the reply-to queue with the same correlation ID.
    5. On failure: log (warning for allowlisted kinds, error otherwise),
       delete only if ``remove_from_queue_on_exception`` and the kind is not
       allowlisted, and forward the raw body to ``error_queue`` if set.

    Decode and handler failures never leave ``run``. Transport failures
    during per-message delete/send are collected and raised together as
    :class:`BatchTransportError` once every message has been attempted.

    Usage::

        consumer = Consumer(SQSQueueService(connection))
        spec = ConsumeSpec().with_queue(queue_url).with_error_queue(dlq_url)

        async def handle(order: PlaceOrder) -> OrderPlaced:
            ...

        await consumer.run(handle, spec, request_type=PlaceOrder)
    """

    def __init__(
        self,
        queue_service: IQueueService,
        publisher: Publisher | None = None,
        *,
        serializer: MessageSerializer | None = None,
        id_generator: IIDGenerator | None = None,
    ) -> None:
        """Configure consumer.

        Args:
            queue_service: Transport adapter used for receive and delete.
            publisher: Used for replies and error-queue forwarding; by default
                a Publisher on the same queue service.
            serializer: Decodes message bodies; default MessageSerializer().
            id_generator: Source of correlation IDs for messages without one.
        """
        self._queue_service = queue_service
        self._serializer = serializer or MessageSerializer()
        self._id_generator = id_generator or UUID4Generator()
        self._publisher = publisher or Publisher(
            queue_service,
            serializer=self._serializer,
            id_generator=self._id_generator,
        )

    async def run(
        self,
        handler: Handler[RequestT, ResponseT],
        spec: ConsumeSpec,
        *,
        request_type: Any = str,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        """Receive one batch from ``spec.queue`` and process every message.

        Args:
            handler: Sync or async callable ``(request) -> response | None``.
            spec: Queue and failure-routing policy.
            request_type: Type the body is decoded into; ``str`` passes the
                raw body.
            cancel_event: Once set, no further transport call is started.

        Raises:
            ValidationError: malformed spec (nothing is received).
            TransportError: the receive call failed.
            BatchTransportError: delete/send failures for individual messages.
            asyncio.CancelledError: ``cancel_event`` was set.
        """
        if spec is None:
            raise ValidationError({"spec": ["consume spec is required"]})
        spec.ensure_valid()

        raise_if_cancelled(cancel_event)
        messages = await self._queue_service.receive(
            spec.queue,
            spec.wait_time_seconds,
            spec.max_messages,
        )
        if not messages:
            return

        errors: list[TransportError] = []
        for message in messages:
            errors.extend(
                await self._process_message(
                    handler, spec, message, request_type, cancel_event
                )
            )
        if errors:
            raise BatchTransportError(errors)

    async def _process_message(
        self,
        handler: Handler[RequestT, ResponseT],
        spec: ConsumeSpec,
        message: QueueMessage,
        request_type: Any,
        cancel_event: asyncio.Event | None,
    ) -> list[TransportError]:
        """Run one message through the pipeline; return transport failures."""
        correlation_id = message.correlation_id or self._id_generator.next_id()
        reply_to = message.reply_to or _non_blank(spec.reply_to)
        log = MessageLogAdapter(
            logger,
            correlation_id,
            queue=spec.queue,
            message_id=message.message_id,
        )
        log.info(
            "Received message from queue %s with id %s",
            spec.queue,
            message.message_id,
        )

        try:
            request = self._decode(message, request_type, correlation_id)
            response = await self._invoke(handler, request)
        except (DecodeError, HandlerError) as e:
            return await self._handle_failure(
                spec, message, e, reply_to, log, cancel_event
            )
        return await self._handle_success(
            spec, message, response, reply_to, log, cancel_event
        )

    def _decode(
        self, message: QueueMessage, request_type: Any, correlation_id: str
    ) -> Any:
        request = self._serializer.decode(message.body, request_type)
        try:
            return inject_correlation_id(request, correlation_id)
        except Exception as e:  # noqa: BLE001
            raise DecodeError(f"Could not set correlation id: {e}") from e

    @staticmethod
    async def _invoke(handler: Handler[RequestT, ResponseT], request: Any) -> Any:
        try:
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:  # noqa: BLE001
            raise HandlerError(e) from e
        return result

    async def _handle_success(
        self,
        spec: ConsumeSpec,
        message: QueueMessage,
        response: Any,
        reply_to: str | None,
        log: MessageLogAdapter,
        cancel_event: asyncio.Event | None,
    ) -> list[TransportError]:
        try:
            await self._delete(spec.queue, message, cancel_event)
        except TransportError as e:
            log.error("Failed to delete message %s: %s", message.message_id, e)
            return [e]

        if response is None or reply_to is None:
            return []
        if is_empty_message(response):
            log.warning("Handler returned an empty response; no reply sent")
            return []

        log.info("Replying to queue: %s", reply_to)
        reply_spec = PublishSpec(queue=reply_to, correlation_id=log.correlation_id)
        try:
            await self._publisher.send(response, reply_spec, cancel_event=cancel_event)
        except TransportError as e:
            log.error("Failed to reply to queue %s: %s", reply_to, e)
            return [e]
        except SerializationError:
            log.exception("Could not encode reply for message %s", message.message_id)
        return []

    async def _handle_failure(
        self,
        spec: ConsumeSpec,
        message: QueueMessage,
        error: DecodeError | HandlerError,
        reply_to: str | None,
        log: MessageLogAdapter,
        cancel_event: asyncio.Event | None,
    ) -> list[TransportError]:
        kind = error_kind(error)
        allowlisted = spec.is_allowlisted(kind)
        if allowlisted:
            log.warning(
                "Expected error processing message %s (%s): %s",
                message.message_id,
                kind,
                error,
            )
        else:
            log.error(
                "Error processing message %s (%s)",
                message.message_id,
                kind,
                exc_info=error,
            )

        errors: list[TransportError] = []
        if spec.remove_from_queue_on_exception and not allowlisted:
            try:
                await self._delete(spec.queue, message, cancel_event)
            except TransportError as e:
                log.error("Failed to delete message %s: %s", message.message_id, e)
                errors.append(e)

        error_queue = _non_blank(spec.error_queue)
        if error_queue is not None:
            errors.extend(
                await self._forward_to_error_queue(
                    error_queue, message, reply_to, log, cancel_event
                )
            )
        return errors

    async def _forward_to_error_queue(
        self,
        error_queue: str,
        message: QueueMessage,
        reply_to: str | None,
        log: MessageLogAdapter,
        cancel_event: asyncio.Event | None,
    ) -> list[TransportError]:
        if is_empty_message(message.body):
            log.warning(
                "Message %s has an empty body; not forwarded to error queue %s",
                message.message_id,
                error_queue,
            )
            return []
        forward_spec = PublishSpec(
            queue=error_queue,
            correlation_id=log.correlation_id,
            reply_to=reply_to,
        )
        try:
            await self._publisher.send(
                message.body, forward_spec, cancel_event=cancel_event
            )
        except TransportError as e:
            log.error("Failed to forward message to error queue %s: %s", error_queue, e)
            return [e]
        return []

    async def _delete(
        self,
        queue: str,
        message: QueueMessage,
        cancel_event: asyncio.Event | None,
    ) -> None:
        raise_if_cancelled(cancel_event)
        await self._queue_service.delete(queue, message.receipt_handle)


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
