"""Redis adapter - Async Redis via redis.asyncio."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

log = structlog.get_logger(__name__)


class RedisStore:
    """KeyValueStorePort backed by a native Redis connection.

    - Uses `redis.asyncio.Redis` with ``decode_responses=True`` (all catalog
      values are UTF-8 strings).
    - Semaphore limits parallel Redis ops (prevents connection exhaustion).
    - Every RedisError is logged and degrades to "no result".

    Args:
        url: Redis URL (e.g. `redis://localhost:6379/0`).
        max_concurrent: Max parallel Redis ops.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        max_concurrent: int = 10,
    ) -> None:
        self.url = url
        self._client: Redis | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info("redis_store_init", url=url, max_concurrent=max_concurrent)

    # --- Context Manager ---
    async def __aenter__(self) -> RedisStore:
        """Create the client and check connectivity.

        An unreachable server is logged, not raised: reads then degrade to
        empty results until Redis comes back.
        """
        if self._client is None:
            self._client = Redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
            )
            try:
                await self._client.ping()
                log.info("redis_connected", url=self.url)
            except RedisError as e:
                log.error("redis_connection_failed", url=self.url, error=str(e))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cleanup: close Redis connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.info("redis_closed")

    # --- KeyValueStorePort implementation ---
    async def smembers(self, key: str) -> list[str]:
        if self._client is None:
            return []
        async with self._semaphore:
            try:
                return sorted(await self._client.smembers(key))
            except RedisError as e:
                log.warning("redis_smembers_error", key=key, error=str(e))
                return []

    async def hgetall(self, key: str) -> dict[str, str]:
        if self._client is None:
            return {}
        async with self._semaphore:
            try:
                return dict(await self._client.hgetall(key))
            except RedisError as e:
                log.warning("redis_hgetall_error", key=key, error=str(e))
                return {}

    async def get(self, key: str) -> str | None:
        if self._client is None:
            return None
        async with self._semaphore:
            try:
                return await self._client.get(key)
            except RedisError as e:
                log.warning("redis_get_error", key=key, error=str(e))
                return None

    async def set(self, key: str, value: str, *, ttl_seconds: int | None = None) -> bool:
        if self._client is None:
            return False
        async with self._semaphore:
            try:
                return bool(await self._client.set(key, value, ex=ttl_seconds or None))
            except RedisError as e:
                log.error("redis_set_error", key=key, error=str(e))
                return False

    async def hset(self, key: str, mapping: Mapping[str, str]) -> int:
        if self._client is None or not mapping:
            return 0
        async with self._semaphore:
            try:
                return int(await self._client.hset(key, mapping=dict(mapping)))
            except RedisError as e:
                log.error("redis_hset_error", key=key, error=str(e))
                return 0

    async def sadd(self, key: str, *members: str) -> int:
        if self._client is None or not members:
            return 0
        async with self._semaphore:
            try:
                return int(await self._client.sadd(key, *members))
            except RedisError as e:
                log.error("redis_sadd_error", key=key, error=str(e))
                return 0

    async def srem(self, key: str, *members: str) -> int:
        if self._client is None or not members:
            return 0
        async with self._semaphore:
            try:
                return int(await self._client.srem(key, *members))
            except RedisError as e:
                log.error("redis_srem_error", key=key, error=str(e))
                return 0

    async def delete(self, key: str) -> bool:
        if self._client is None:
            return False
        async with self._semaphore:
            try:
                return await self._client.delete(key) > 0
            except RedisError as e:
                log.error("redis_delete_error", key=key, error=str(e))
                return False
