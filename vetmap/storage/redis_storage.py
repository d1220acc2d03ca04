"""
Redis-backed key-value storage for deployments that share favorites
between processes.
"""

import asyncio
import logging
from typing import Optional

from redis import asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from vetmap.core.exceptions import PersistenceError


class RedisStorage:
    """
    Redis storage with lazy connection management.

    Unlike a cache, a failed read or write is not swallowed: it raises
    ``PersistenceError`` so the favorites store can keep memory and storage
    consistent.
    """

    def __init__(self, redis_url: str, socket_timeout: float = 5.0, client: Optional[Redis] = None):
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.redis_client: Optional[Redis] = client
        self.logger = logging.getLogger(__name__)
        self._connection_lock = asyncio.Lock()

    async def connect(self) -> Redis:
        """Return a connected client, creating it on first use."""
        async with self._connection_lock:
            if self.redis_client is None:
                self.logger.info(f"Connecting to Redis at {self.redis_url}")
                self.redis_client = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=self.socket_timeout,
                    socket_connect_timeout=self.socket_timeout,
                )
            return self.redis_client

    async def disconnect(self) -> None:
        """Disconnect from Redis server."""
        async with self._connection_lock:
            if self.redis_client:
                try:
                    await self.redis_client.aclose()
                    self.logger.info("Disconnected from Redis")
                except RedisError as e:
                    self.logger.warning(f"Error during Redis disconnect: {str(e)}")
                finally:
                    self.redis_client = None

    async def close(self) -> None:
        await self.disconnect()

    async def get(self, key: str) -> Optional[str]:
        client = await self.connect()
        try:
            return await client.get(key)
        except RedisError as e:
            self.logger.warning(f"Error reading key '{key}': {str(e)}")
            raise PersistenceError(
                "Could not read favorites from Redis",
                details={"key": key, "error": str(e)},
            ) from e

    async def set(self, key: str, value: str) -> None:
        client = await self.connect()
        try:
            result = await client.set(key, value)
        except RedisError as e:
            self.logger.warning(f"Error setting key '{key}': {str(e)}")
            raise PersistenceError(
                "Could not save favorites to Redis",
                details={"key": key, "error": str(e)},
            ) from e
        if not result:
            raise PersistenceError("Redis refused to store favorites", details={"key": key})
