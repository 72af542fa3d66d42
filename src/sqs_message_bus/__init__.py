"""Request/reply messaging over SQS — publisher, consumer and queue adapters."""

from __future__ import annotations

from .consumer import Consumer
from .correlation import HasCorrelationId, IIDGenerator, UUID4Generator
from .exceptions import (
    BatchTransportError,
    DecodeError,
    HandlerError,
    MessageBusError,
    QueueConnectionError,
    SerializationError,
    TransportError,
    ValidationError,
    error_kind,
    kind_of,
)
from .memory import InMemoryQueueService
from .message import CORRELATION_ID_ATTRIBUTE, REPLY_TO_ATTRIBUTE, QueueMessage
from .params import ConsumeSpec, PublishSpec
from .ports import IQueueService
from .publisher import Publisher
from .serialization import MessageSerializer

__all__ = [
    "CORRELATION_ID_ATTRIBUTE",
    "REPLY_TO_ATTRIBUTE",
    "BatchTransportError",
    "ConsumeSpec",
    "Consumer",
    "DecodeError",
    "HandlerError",
    "HasCorrelationId",
    "IIDGenerator",
    "IQueueService",
    "InMemoryQueueService",
    "MessageBusError",
    "MessageSerializer",
    "Publisher",
    "PublishSpec",
    "QueueConnectionError",
    "QueueMessage",
    "SerializationError",
    "TransportError",
    "UUID4Generator",
    "ValidationError",
    "error_kind",
    "kind_of",
]
