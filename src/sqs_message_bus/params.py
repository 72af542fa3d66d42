"""PublishSpec / ConsumeSpec — immutable call parameters built fluently.

Each ``with_*`` method returns a new instance, so a partially built spec can
be shared between concurrent call sites without interference::

    spec = (
        ConsumeSpec()
        .with_queue(queue_url)
        .with_error_queue(error_queue_url)
        .with_remove_from_queue_on_exception()
        .with_exception_allowlist(PaymentPendingError)
    )
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ValidationError, kind_of


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class PublishSpec(BaseModel):
    """Where and how to publish one message."""

    model_config = ConfigDict(frozen=True)

    queue: str = ""
    correlation_id: str | None = None
    reply_to: str | None = None

    def with_queue(self, queue: str) -> PublishSpec:
        return self.model_copy(update={"queue": queue})

    def with_correlation_id(self, correlation_id: str) -> PublishSpec:
        return self.model_copy(update={"correlation_id": correlation_id})

    def with_reply_to(self, reply_to: str) -> PublishSpec:
        return self.model_copy(update={"reply_to": reply_to})

    def ensure_valid(self) -> None:
        """Raise ValidationError unless the spec can be executed."""
        if _is_blank(self.queue):
            raise ValidationError({"queue": ["queue is required"]})


class ConsumeSpec(BaseModel):
    """Poll and failure-routing policy for one consume call.

    ``exception_allowlist`` holds error-kind tags (see
    :func:`sqs_message_bus.exceptions.error_kind`). Messages failing with an
    allowlisted kind are logged as expected errors and always stay on the
    queue, even when ``remove_from_queue_on_exception`` is set.
    """

    model_config = ConfigDict(frozen=True)

    queue: str = ""
    wait_time_seconds: int = 10
    max_messages: int = 10
    error_queue: str | None = None
    reply_to: str | None = None
    remove_from_queue_on_exception: bool = False
    exception_allowlist: frozenset[str] = Field(default_factory=frozenset)

    def with_queue(self, queue: str) -> ConsumeSpec:
        return self.model_copy(update={"queue": queue})

    def with_wait_time_seconds(self, wait_time_seconds: int) -> ConsumeSpec:
        return self.model_copy(update={"wait_time_seconds": wait_time_seconds})

    def with_max_messages(self, max_messages: int) -> ConsumeSpec:
        return self.model_copy(update={"max_messages": max_messages})

    def with_error_queue(self, error_queue: str) -> ConsumeSpec:
        return self.model_copy(update={"error_queue": error_queue})

    def with_reply_to(self, reply_to: str) -> ConsumeSpec:
        return self.model_copy(update={"reply_to": reply_to})

    def with_remove_from_queue_on_exception(self, flag: bool = True) -> ConsumeSpec:
        return self.model_copy(update={"remove_from_queue_on_exception": flag})

    def with_exception_allowlist(
        self, *kinds: str | type[BaseException]
    ) -> ConsumeSpec:
        """Replace the allowlist. Accepts kind tags or exception classes."""
        tags = frozenset(k if isinstance(k, str) else kind_of(k) for k in kinds)
        return self.model_copy(update={"exception_allowlist": tags})

    def is_allowlisted(self, kind: str) -> bool:
        return kind in self.exception_allowlist

    def ensure_valid(self) -> None:
        """Raise ValidationError listing every problem with the spec."""
        errors: dict[str, list[str]] = {}
        if _is_blank(self.queue):
            errors.setdefault("queue", []).append("queue is required")
        if self.wait_time_seconds < 0:
            errors.setdefault("wait_time_seconds", []).append("must be >= 0")
        if self.max_messages < 0:
            errors.setdefault("max_messages", []).append("must be >= 0")
        if errors:
            raise ValidationError(errors)
