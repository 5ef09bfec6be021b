"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from cinedock.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from cinedock.application.use_cases import (
        CatalogListingUseCase,
        StreamResolveUseCase,
    )
    from cinedock.domain.ports import (
        CatalogRepositoryPort,
        KeyValueStorePort,
        SessionVerifierPort,
    )
    from cinedock.infrastructure.stream.bunny_token import BunnyTokenSigner
    from cinedock.infrastructure.stream.hls_proxy import HlsProxy
    from cinedock.infrastructure.stream.subtitle_proxy import SubtitleProxy


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    kv_store: KeyValueStorePort

    # Domain Ports
    catalog: CatalogRepositoryPort
    session_verifier: SessionVerifierPort

    # Application Services
    catalog_uc: CatalogListingUseCase
    stream_uc: StreamResolveUseCase

    # Same-origin relays
    hls_proxy: HlsProxy
    subtitle_proxy: SubtitleProxy
    bunny_signer: BunnyTokenSigner
