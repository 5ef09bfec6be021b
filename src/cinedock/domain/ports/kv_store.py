"""KV Store Port - Interface for the mutable key-attribute catalog store."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class KeyValueStorePort(Protocol):
    """Port for the admin-curated, mutable catalog store.

    Implementations:
      - UpstashRestStore (Redis command verbs over HTTP)
      - RedisStore (redis.asyncio client)

    Reads never raise: missing credentials or transport failures degrade
    to "no result" (empty set / empty mapping / None).
    """

    async def smembers(self, key: str) -> list[str]:
        """Members of a set. Empty list = missing key or store unavailable."""
        ...

    async def hgetall(self, key: str) -> dict[str, str]:
        """All fields of a hash. Empty dict = missing key or store unavailable."""
        ...

    async def get(self, key: str) -> str | None:
        """Retrieve a string value. None = not found / unavailable."""
        ...

    async def set(self, key: str, value: str, *, ttl_seconds: int | None = None) -> bool:
        """Set a string value with optional TTL (seconds)."""
        ...

    async def hset(self, key: str, mapping: Mapping[str, str]) -> int:
        """Set hash fields. Returns number of fields added."""
        ...

    async def sadd(self, key: str, *members: str) -> int:
        ...

    async def srem(self, key: str, *members: str) -> int:
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def aclose(self) -> None:
        """Cleanup hook (e.g. close Redis connection)."""
        ...

    async def __aenter__(self) -> KeyValueStorePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
