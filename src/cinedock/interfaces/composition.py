"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from cinedock.application.use_cases import CatalogListingUseCase, StreamResolveUseCase
from cinedock.infrastructure.auth.session import JwtSessionVerifier
from cinedock.infrastructure.catalog import CatalogStore, FlatFileCatalog
from cinedock.infrastructure.kv import create_store
from cinedock.infrastructure.stream.bunny_token import BunnyTokenSigner
from cinedock.infrastructure.stream.hls_proxy import HlsProxy
from cinedock.infrastructure.stream.subtitle_proxy import SubtitleProxy
from cinedock.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (required by the REST store and both relays)
        2. Mutable store
        3. Catalog repository (store + flat files)
        4. Use cases, relays, session verifier
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    try:
        # 2) Mutable store
        kv_store = create_store(config.store, http_client=state.http_client)
        await kv_store.__aenter__()
        state.kv_store = kv_store
        if not config.store.has_credentials:
            log.warning("store_unconfigured", backend=config.store.backend)

        # 3) Catalog repository
        files = FlatFileCatalog(config.catalog)
        state.catalog = CatalogStore(kv=kv_store, files=files, config=config.catalog)
        log.info("catalog_initialized", data_dir=str(config.catalog.data_dir))

        # 4) Use cases + relays
        state.catalog_uc = CatalogListingUseCase(state.catalog)
        state.stream_uc = StreamResolveUseCase(
            state.catalog,
            series_category=config.catalog.series_category,
            foreign_category=config.catalog.foreign_category,
        )
        state.hls_proxy = HlsProxy(
            http_client=state.http_client,
            user_agent=config.http_user_agent,
            timeout_seconds=config.http_timeout_seconds,
            proxy_path=config.proxy.path,
        )
        state.subtitle_proxy = SubtitleProxy(
            http_client=state.http_client,
            user_agent=config.http_user_agent,
            timeout_seconds=config.http_timeout_seconds,
        )

        state.bunny_signer = BunnyTokenSigner(config.bunny)
        if not state.bunny_signer.configured:
            log.info("bunny_signer_unconfigured")

        verifier = JwtSessionVerifier(config.auth)
        state.session_verifier = verifier
        if config.auth.require_session and not verifier.configured:
            log.warning("session_secret_missing", require_session=True)

        log.info("app_startup_complete", environment=config.environment)
        yield
    finally:
        kv = getattr(state, "kv_store", None)
        if kv is not None:
            await kv.aclose()
            log.info("kv_store_closed")

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
