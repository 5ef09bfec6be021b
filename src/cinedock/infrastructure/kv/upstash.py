"""Upstash-style REST adapter - Redis command verbs over HTTP."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

import httpx
import structlog

log = structlog.get_logger(__name__)


def pairs_to_dict(flat: Any) -> dict[str, str]:
    """Convert an HGETALL reply (``[k1, v1, k2, v2, ...]``) into a dict.

    A mapping reply is passed through; anything else yields ``{}``.
    """
    if isinstance(flat, Mapping):
        return {str(k): "" if v is None else str(v) for k, v in flat.items()}
    if not isinstance(flat, Sequence) or isinstance(flat, (str, bytes)):
        return {}
    return {
        str(flat[i]): "" if flat[i + 1] is None else str(flat[i + 1])
        for i in range(0, len(flat) - 1, 2)
    }


class UpstashRestStore:
    """KeyValueStorePort over the REST command API.

    ``GET {url}/{COMMAND}/{arg1}/{arg2}...`` with a bearer token; the reply
    is ``{"result": ...}``.  Without URL/token every read is empty and every
    write is a no-op.  Transport and protocol errors are logged and
    degrade to "no result".

    Args:
        url: REST endpoint base URL.
        token: Bearer token.
        http_client: Shared httpx client (timeout configured by the owner).
        max_concurrent: Max parallel commands.
    """

    def __init__(
        self,
        *,
        url: str | None,
        token: str | None,
        http_client: httpx.AsyncClient,
        max_concurrent: int = 10,
    ) -> None:
        self._url = (url or "").rstrip("/")
        self._token = token or ""
        self._http = http_client
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info("kv_rest_store_init", configured=self.configured)

    @property
    def configured(self) -> bool:
        return bool(self._url and self._token)

    async def command(
        self, verb: str, *args: str | int, params: dict[str, Any] | None = None
    ) -> Any:
        """Run one command. Returns the ``result`` field or None on any failure."""
        if not self.configured:
            log.debug("kv_store_unconfigured", verb=verb)
            return None

        path = "/".join([verb.upper(), *(quote(str(a), safe="") for a in args)])
        async with self._semaphore:
            try:
                resp = await self._http.get(
                    f"{self._url}/{path}",
                    params=params,
                    headers={"Authorization": f"Bearer {self._token}"},
                )
                resp.raise_for_status()
                data = resp.json()
            except httpx.HTTPError:
                log.warning("kv_command_failed", verb=verb, exc_info=True)
                return None
            except ValueError:
                log.warning("kv_command_bad_reply", verb=verb, exc_info=True)
                return None

        if not isinstance(data, dict):
            return None
        if data.get("error"):
            log.warning("kv_command_error", verb=verb, error=data["error"])
            return None
        return data.get("result")

    async def __aenter__(self) -> UpstashRestStore:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # --- KeyValueStorePort implementation ---
    async def smembers(self, key: str) -> list[str]:
        result = await self.command("SMEMBERS", key)
        if not isinstance(result, list):
            return []
        return [str(m) for m in result]

    async def hgetall(self, key: str) -> dict[str, str]:
        return pairs_to_dict(await self.command("HGETALL", key))

    async def get(self, key: str) -> str | None:
        result = await self.command("GET", key)
        return None if result is None else str(result)

    async def set(self, key: str, value: str, *, ttl_seconds: int | None = None) -> bool:
        params = {"EX": ttl_seconds} if ttl_seconds else None
        return await self.command("SET", key, value, params=params) == "OK"

    async def hset(self, key: str, mapping: Mapping[str, str]) -> int:
        if not mapping:
            return 0
        args: list[str] = []
        for field_name, value in mapping.items():
            args.extend((field_name, value))
        return int(await self.command("HSET", key, *args) or 0)

    async def sadd(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(await self.command("SADD", key, *members) or 0)

    async def srem(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(await self.command("SREM", key, *members) or 0)

    async def delete(self, key: str) -> bool:
        return int(await self.command("DEL", key) or 0) > 0

    async def aclose(self) -> None:
        """The HTTP client is owned by the composition root."""
        return None
