"""
KeyValueStore implementations

- InMemoryKeyValueStore: process-local dict (default, tests)
- RedisKeyValueStore: redis.asyncio client with a connection pool
"""

from typing import Dict, Optional

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError

from shared.config.settings import ApplicationSettings, StoreBackend
from shared.exceptions.sortly import HistoryStoreError
from shared.interfaces.capabilities import KeyValueStore
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisKeyValueStore(KeyValueStore):
    """
    Async Redis-backed store.

    The client is created lazily on first use; RedisError is re-raised as
    HistoryStoreError so callers see a single domain error type.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        max_connections: int = 20,
        socket_timeout: int = 5,
        client: Optional[redis.Redis] = None,
    ):
        self.url = url
        self._pool: Optional[ConnectionPool] = None
        self._client = client
        self._max_connections = max_connections
        self._socket_timeout = socket_timeout

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._pool = ConnectionPool.from_url(
                self.url,
                decode_responses=True,
                max_connections=self._max_connections,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info(f"Redis key-value store configured for {self.url}")
        return self._client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(key)
        except RedisError as e:
            logger.error(f"Redis GET {key} failed: {e}")
            raise HistoryStoreError(str(e)) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self.client.set(key, value)
        except RedisError as e:
            logger.error(f"Redis SET {key} failed: {e}")
            raise HistoryStoreError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.error(f"Redis DEL {key} failed: {e}")
            raise HistoryStoreError(str(e)) from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
        logger.info("Disconnected from Redis")


def create_key_value_store(settings: ApplicationSettings) -> KeyValueStore:
    """Build the store selected by `STORE_BACKEND`"""
    if settings.sortly.store_backend == StoreBackend.REDIS:
        return RedisKeyValueStore(url=settings.redis.redis_url)
    return InMemoryKeyValueStore()
