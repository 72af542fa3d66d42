"""Correlation ID generation and injection into decoded requests."""

from __future__ import annotations

import contextlib
import uuid
from typing import Any, Protocol, runtime_checkable

from .message import CORRELATION_ID_ATTRIBUTE

_CORRELATION_FIELDS = ("correlation_id", CORRELATION_ID_ATTRIBUTE)


class IIDGenerator(Protocol):
    """
    Protocol for correlation ID generation strategies.
    Useful for deterministic IDs in tests or alternative formats (UUIDv7, ULID).
    """

    def next_id(self) -> str:
        """Generates the next unique identifier."""
        ...


class UUID4Generator(IIDGenerator):
    """
    Default ID generator using UUIDv4.
    """

    def next_id(self) -> str:
        """Returns a string representation of a random UUIDv4."""
        return str(uuid.uuid4())


@runtime_checkable
class HasCorrelationId(Protocol):
    """Capability for request types that want the resolved correlation ID."""

    def set_correlation_id(self, correlation_id: str) -> None: ...


def _pydantic_field_name(model: Any) -> str | None:
    fields = getattr(type(model), "model_fields", {})
    for name, info in fields.items():
        if name in _CORRELATION_FIELDS or info.alias == CORRELATION_ID_ATTRIBUTE:
            return str(name)
    return None


def inject_correlation_id(value: Any, correlation_id: str) -> Any:
    """Return *value* carrying *correlation_id* in its correlation field.

    Pydantic models are copied (frozen models included), so callers must use
    the returned value. Values without a correlation field are returned as-is.
    """
    if isinstance(value, HasCorrelationId):
        value.set_correlation_id(correlation_id)
        return value
    if hasattr(value, "model_copy"):
        field_name = _pydantic_field_name(value)
        if field_name is None:
            return value
        return value.model_copy(update={field_name: correlation_id})
    if isinstance(value, dict):
        for key in _CORRELATION_FIELDS:
            if key in value:
                value[key] = correlation_id
        return value
    for key in _CORRELATION_FIELDS:
        if hasattr(value, key):
            with contextlib.suppress(AttributeError, TypeError):
                object.__setattr__(value, key, correlation_id)
    return value
