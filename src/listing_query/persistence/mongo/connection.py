"""MongoConnectionManager — Motor client lifecycle and collection lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...exceptions import BackendUnavailableError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """Wrap a Motor client with lazy connect, collection lookup and ping."""

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        client: AsyncIOMotorClient[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self._url = url
        self._database = database
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._kwargs = kwargs
        self._client = client

    @property
    def database_name(self) -> str:
        return self._database

    def connect(self) -> AsyncIOMotorClient[Any]:
        """Create and cache the Motor client. Idempotent.

        Motor connects lazily, so no I/O happens here.
        """
        if self._client is not None:
            return self._client
        from motor.motor_asyncio import AsyncIOMotorClient

        self._client = AsyncIOMotorClient(
            self._url,
            serverSelectionTimeoutMS=self._server_selection_timeout_ms,
            connectTimeoutMS=self._connect_timeout_ms,
            **self._kwargs,
        )
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        """Return the Motor client; raises if not connected."""
        if self._client is None:
            raise BackendUnavailableError("Not connected; call connect() first")
        return self._client

    def collection(self, name: str) -> Any:
        return self.client.get_database(self._database).get_collection(name)

    def close(self) -> None:
        """Close the client (synchronous; Motor client.close() is sync)."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            logger.warning("MongoDB ping failed: %s", exc)
            return False
        return True
