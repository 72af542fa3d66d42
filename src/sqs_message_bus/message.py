"""QueueMessage — immutable view of a received transport message."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CORRELATION_ID_ATTRIBUTE = "CorrelationId"
REPLY_TO_ATTRIBUTE = "ReplyTo"


def string_attribute(value: str) -> dict[str, str]:
    """Encode *value* as an SQS String message attribute."""
    return {"DataType": "String", "StringValue": value}


class QueueMessage(BaseModel):
    """Message as delivered by the queue service.

    Owned by the queue service; the pipeline only reads it. ``receipt_handle``
    is required to acknowledge (delete) the message.
    """

    model_config = ConfigDict(frozen=True)

    body: str = ""
    message_id: str = ""
    receipt_handle: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_sqs(cls, raw: dict[str, Any]) -> QueueMessage:
        """Build from one entry of an SQS ``ReceiveMessage`` response."""
        attributes: dict[str, str] = {}
        for name, value in (raw.get("MessageAttributes") or {}).items():
            string_value = value.get("StringValue") if isinstance(value, dict) else None
            if string_value is not None:
                attributes[name] = str(string_value)
        return cls(
            body=raw.get("Body") or "",
            message_id=raw.get("MessageId") or "",
            receipt_handle=raw.get("ReceiptHandle") or "",
            attributes=attributes,
        )

    def attribute(self, name: str) -> str | None:
        """Return the attribute *name* (exact match), or None if absent or blank."""
        value = self.attributes.get(name)
        if value is None or not value.strip():
            return None
        return value

    @property
    def correlation_id(self) -> str | None:
        return self.attribute(CORRELATION_ID_ATTRIBUTE)

    @property
    def reply_to(self) -> str | None:
        return self.attribute(REPLY_TO_ATTRIBUTE)
