"""In-memory queue service for testing."""

from __future__ import annotations

from .queue_service import InMemoryQueueService

__all__ = [
    "InMemoryQueueService",
]
