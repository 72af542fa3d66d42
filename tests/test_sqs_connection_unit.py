"""Unit tests for SQSConnectionManager and SQSSettings (no real AWS)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from sqs_message_bus.exceptions import QueueConnectionError, ValidationError
from sqs_message_bus.sqs.connection import SQSConnectionManager
from sqs_message_bus.sqs.settings import SQSSettings

LOCALSTACK = "http://sqs.us-east-1.localhost.localstack.cloud:4566"


@pytest.fixture
def mock_session() -> MagicMock:
    session = MagicMock()
    mock_cm = MagicMock()
    mock_client = MagicMock()
    mock_client.get_queue_url = AsyncMock(
        return_value={"QueueUrl": "https://sqs.us-east-1.amazonaws.com/123/my-queue"}
    )
    mock_client.list_queues = AsyncMock(return_value={"QueueUrls": []})
    mock_cm.__aenter__ = AsyncMock(return_value=mock_client)
    mock_cm.__aexit__ = AsyncMock(return_value=None)
    session.create_client = MagicMock(return_value=mock_cm)
    return session


@pytest.mark.asyncio
async def test_get_client_creates_and_caches(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(region_name="eu-west-1", session=mock_session)
    client1 = await conn.get_client()
    client2 = await conn.get_client()
    assert client1 is client2
    mock_session.create_client.assert_called_once()
    assert mock_session.create_client.call_args.args[0] == "sqs"
    assert mock_session.create_client.call_args.kwargs["region_name"] == "eu-west-1"


@pytest.mark.asyncio
async def test_get_client_failure_raises_connection_error(
    mock_session: MagicMock,
) -> None:
    mock_session.create_client = MagicMock(side_effect=RuntimeError("bad config"))
    conn = SQSConnectionManager(session=mock_session)
    with pytest.raises(QueueConnectionError) as exc_info:
        await conn.get_client()
    assert "bad config" in str(exc_info.value)


@pytest.mark.asyncio
async def test_queue_url_passes_through_unchanged(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(session=mock_session)
    url = f"{LOCALSTACK}/000000000000/test"
    assert await conn.get_queue_url(url) == url
    mock_session.create_client.assert_not_called()


@pytest.mark.asyncio
async def test_queue_name_is_resolved_once(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(session=mock_session)
    url1 = await conn.get_queue_url("my-queue")
    url2 = await conn.get_queue_url("my-queue")
    assert url1 == url2 == "https://sqs.us-east-1.amazonaws.com/123/my-queue"
    client = await conn.get_client()
    client.get_queue_url.assert_awaited_once_with(QueueName="my-queue")


@pytest.mark.asyncio
async def test_queue_name_resolution_error(mock_session: MagicMock) -> None:
    client = mock_session.create_client.return_value.__aenter__.return_value
    client.get_queue_url = AsyncMock(side_effect=RuntimeError("network error"))
    conn = SQSConnectionManager(session=mock_session)
    with pytest.raises(QueueConnectionError) as exc_info:
        await conn.get_queue_url("my-queue")
    assert exc_info.value.queue == "my-queue"
    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_close_cleans_up_client(mock_session: MagicMock) -> None:
    mock_cm = mock_session.create_client.return_value
    conn = SQSConnectionManager(session=mock_session)
    await conn.get_client()
    await conn.close()
    await conn.close()
    mock_cm.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_context_manager(mock_session: MagicMock) -> None:
    mock_cm = mock_session.create_client.return_value
    async with SQSConnectionManager(session=mock_session) as conn:
        assert await conn.get_client() is mock_cm.__aenter__.return_value
    mock_cm.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_health_check(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(session=mock_session)
    assert await conn.health_check() is True
    client = await conn.get_client()
    client.list_queues.assert_awaited_once_with(MaxResults=1)

    client.list_queues = AsyncMock(side_effect=RuntimeError("timeout"))
    assert await conn.health_check() is False


@pytest.mark.asyncio
async def test_from_settings_passes_endpoint_and_credentials(
    mock_session: MagicMock,
) -> None:
    settings = SQSSettings(
        region_name="us-east-1",
        endpoint_url=LOCALSTACK,
        aws_access_key_id="test",
        aws_secret_access_key="secret",
    )
    conn = SQSConnectionManager.from_settings(settings, session=mock_session)
    await conn.get_client()
    kwargs = mock_session.create_client.call_args.kwargs
    assert kwargs == {
        "region_name": "us-east-1",
        "endpoint_url": LOCALSTACK,
        "aws_access_key_id": "test",
        "aws_secret_access_key": "secret",
    }


def test_settings_default_credential_chain() -> None:
    assert SQSSettings().client_kwargs() == {}


def test_settings_reject_partial_credentials() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SQSSettings(aws_access_key_id="only-key").client_kwargs()
    assert "credentials" in exc_info.value.errors


def test_settings_reject_blank_region() -> None:
    with pytest.raises(ValidationError):
        SQSSettings(region_name=" ").client_kwargs()
