"""Store factory - creates the mutable-store adapter selected by config."""

from __future__ import annotations

import httpx
import structlog

from cinedock.domain.ports.kv_store import KeyValueStorePort
from cinedock.infrastructure.config.schema import StoreConfig
from cinedock.infrastructure.kv.redis_store import RedisStore
from cinedock.infrastructure.kv.upstash import UpstashRestStore

log = structlog.get_logger(__name__)


def create_store(
    config: StoreConfig,
    *,
    http_client: httpx.AsyncClient,
) -> KeyValueStorePort:
    """Build the KeyValueStorePort implementation for ``config.backend``.

    Raises:
        ValueError: If `backend` is unknown.
    """
    if config.backend == "upstash":
        log.info("store_factory_create", backend=config.backend)
        return UpstashRestStore(
            url=config.rest_url,
            token=config.rest_token,
            http_client=http_client,
            max_concurrent=config.max_concurrent,
        )
    elif config.backend == "redis":
        log.info("store_factory_create", backend=config.backend, url=config.redis_url)
        return RedisStore(url=config.redis_url, max_concurrent=config.max_concurrent)
    else:
        raise ValueError(
            f"Unknown store backend: {config.backend!r}. Must be 'upstash' or 'redis'."
        )
