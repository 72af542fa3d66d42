"""Pytest fixtures for message bus tests."""

from __future__ import annotations

import itertools
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure the package is importable when running pytest without
# pip install -e .
_src = Path(__file__).resolve().parent.parent / "src"
if _src.is_dir() and str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from sqs_message_bus.memory import InMemoryQueueService  # noqa: E402
from sqs_message_bus.message import QueueMessage  # noqa: E402


class SequentialIdGenerator:
    """Deterministic correlation IDs: ``gen-1``, ``gen-2``, …"""

    def __init__(self, prefix: str = "gen") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


@pytest.fixture
def id_generator() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture
def queue_service() -> MagicMock:
    """Queue service double recording receive/delete/send calls."""
    service = MagicMock()
    service.receive = AsyncMock(return_value=[])
    service.delete = AsyncMock(return_value=None)
    service.send = AsyncMock(return_value="delivery-id")
    return service


@pytest.fixture
def memory_queue() -> InMemoryQueueService:
    return InMemoryQueueService()


def make_message(
    body: str = '{"Id": 1}',
    *,
    message_id: str = "msg-1",
    receipt_handle: str = "rh-1",
    **attributes: str,
) -> QueueMessage:
    return QueueMessage(
        body=body,
        message_id=message_id,
        receipt_handle=receipt_handle,
        attributes=attributes,
    )
