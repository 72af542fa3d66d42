"""SQS transport adapter."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .queue_service import SQSQueueService
from .settings import SQSSettings

__all__ = [
    "SQSConnectionManager",
    "SQSQueueService",
    "SQSSettings",
]
