"""MessageSerializer — message bodies to/from JSON text."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from .exceptions import DecodeError, SerializationError


def _json_serializer(obj: Any) -> Any:
    """Serialize datetime and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def is_empty_message(message: Any) -> bool:
    """Return True for values that cannot be published (None, blank text)."""
    if message is None:
        return True
    if isinstance(message, str):
        return not message.strip()
    if isinstance(message, (bytes, bytearray)):
        return len(message) == 0
    return False


class MessageSerializer:
    """Encode outbound messages and decode inbound bodies.

    Plain strings travel verbatim; everything else is structured JSON text.
    Decoding goes through a pydantic ``TypeAdapter`` so pydantic models,
    dataclasses, TypedDicts, dicts and scalars are all valid request types.
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def encode(self, message: Any) -> str:
        """Encode *message* to a message body."""
        if isinstance(message, str):
            return message
        if isinstance(message, (bytes, bytearray)):
            try:
                return bytes(message).decode("utf-8")
            except UnicodeDecodeError as e:
                raise SerializationError(str(e)) from e
        if isinstance(message, BaseModel):
            try:
                return message.model_dump_json(by_alias=True)
            except (PydanticSerializationError, TypeError, ValueError) as e:
                raise SerializationError(str(e)) from e
        try:
            return json.dumps(message, default=_json_serializer)
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

    def _adapter(self, request_type: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(request_type)
        if adapter is None:
            adapter = TypeAdapter(request_type)
            self._adapters[request_type] = adapter
        return adapter

    def decode(self, body: str, request_type: Any = str) -> Any:
        """Decode *body* into *request_type*; ``str`` returns the raw body."""
        if request_type is str:
            return body
        try:
            return self._adapter(request_type).validate_json(body)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Body does not match {getattr(request_type, '__name__', request_type)}"
                f": {e}"
            ) from e
        except (TypeError, ValueError) as e:
            raise DecodeError(str(e)) from e
