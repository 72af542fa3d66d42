"""MessageLogAdapter — explicit per-message logging context."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any


class MessageLogAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Attach correlation_id (and queue/message_id) to every record it emits.

    One adapter is created per message and handed down the pipeline, so the
    context of one message never leaks into a sibling's log records.
    """

    def __init__(
        self,
        logger: logging.Logger,
        correlation_id: str,
        **context: Any,
    ) -> None:
        super().__init__(logger, {"correlation_id": correlation_id, **context})

    @property
    def correlation_id(self) -> str:
        return str((self.extra or {})["correlation_id"])

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return f"[correlation_id={self.correlation_id}] {msg}", kwargs
