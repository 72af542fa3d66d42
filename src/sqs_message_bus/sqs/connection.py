"""SQS client management and queue URL resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from aiobotocore.session import AioSession

from ..exceptions import QueueConnectionError

if TYPE_CHECKING:
    from .settings import SQSSettings


class SQSConnectionManager:
    """Manages an aiobotocore SQS client and queue URL resolution."""

    def __init__(
        self,
        region_name: str = "us-east-1",
        *,
        session: AioSession | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure region and optional session/client kwargs."""
        self._region = region_name
        self._session = session or AioSession()
        self._client_kwargs = client_kwargs
        self._client: Any = None
        self._client_cm: Any = None
        self._queue_urls: dict[str, str] = {}

    @classmethod
    def from_settings(
        cls,
        settings: SQSSettings,
        *,
        session: AioSession | None = None,
    ) -> SQSConnectionManager:
        """Build a manager from validated SQSSettings."""
        return cls(
            settings.region_name,
            session=session,
            **settings.client_kwargs(),
        )

    async def get_client(self) -> Any:
        """Return shared SQS client; create if needed."""
        if self._client is None:
            try:
                self._client_cm = self._session.create_client(
                    "sqs",
                    region_name=self._region,
                    **self._client_kwargs,
                )
                self._client = await self._client_cm.__aenter__()
            except Exception as e:
                self._client_cm = None
                raise QueueConnectionError(
                    f"Could not create SQS client: {e}", operation="connect"
                ) from e
        return self._client

    async def get_queue_url(self, queue: str) -> str:
        """Resolve a queue name to its URL; URLs are returned unchanged."""
        if queue.startswith(("https://", "http://")):
            return queue
        cached = self._queue_urls.get(queue)
        if cached is not None:
            return cached
        client = await self.get_client()
        try:
            out = await client.get_queue_url(QueueName=queue)
        except Exception as e:
            raise QueueConnectionError(
                str(e), operation="get_queue_url", queue=queue
            ) from e
        url = str(out["QueueUrl"])
        self._queue_urls[queue] = url
        return url

    async def close(self) -> None:
        """Close the client if open."""
        if self._client_cm is not None:
            await self._client_cm.__aexit__(None, None, None)
            self._client_cm = None
            self._client = None

    async def health_check(self) -> bool:
        """Return True if we can list queues (lightweight check)."""
        try:
            client = await self.get_client()
            await client.list_queues(MaxResults=1)
            return True
        except Exception:  # noqa: BLE001
            return False

    async def __aenter__(self) -> SQSConnectionManager:
        await self.get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
