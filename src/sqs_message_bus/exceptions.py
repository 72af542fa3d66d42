"""Exceptions for sqs-message-bus."""

from __future__ import annotations


class MessageBusError(Exception):
    """Root exception for the message bus."""


class ValidationError(MessageBusError):
    """Raised when a publish/consume call is malformed.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class SerializationError(MessageBusError):
    """Raised when a message cannot be encoded for the wire."""


class DecodeError(SerializationError):
    """Raised when a message body does not match the expected request type."""


class HandlerError(MessageBusError):
    """Wraps an exception raised by application handler code.

    ``kind`` is the kind of the wrapped error so that allowlists name
    application exception types rather than this wrapper.
    """

    def __init__(self, original: BaseException) -> None:
        self.original = original
        super().__init__(f"{type(original).__name__}: {original}")

    @property
    def kind(self) -> str:
        return error_kind(self.original)


class TransportError(MessageBusError):
    """Raised when a queue service call fails."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        queue: str | None = None,
    ) -> None:
        self.operation = operation
        self.queue = queue
        super().__init__(message)


class QueueConnectionError(TransportError):
    """Raised when the queue client cannot be created or a queue URL resolved."""


class BatchTransportError(TransportError):
    """Transport failures collected while processing one received batch.

    Every message in the batch was attempted; ``errors`` holds the failures
    in the order they happened.
    """

    def __init__(self, errors: list[TransportError]) -> None:
        self.errors = errors
        first = errors[0] if errors else "unknown"
        super().__init__(
            f"{len(errors)} transport error(s) while processing batch. "
            f"First error: {first}"
        )


def kind_of(exc_type: type[BaseException]) -> str:
    """Return the kind tag for an exception class."""
    kind = getattr(exc_type, "kind", None)
    if isinstance(kind, str):
        return kind
    return exc_type.__name__


def error_kind(exc: BaseException) -> str:
    """Return the kind tag for an exception instance.

    A string ``kind`` attribute wins; otherwise the class name is used.
    """
    kind = getattr(exc, "kind", None)
    if isinstance(kind, str):
        return kind
    return type(exc).__name__
