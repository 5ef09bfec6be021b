"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from cinedock.infrastructure.config import AppConfig
from cinedock.interfaces.app_state import AppState
from cinedock.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app — configuration ONLY, NO resource initialization.

    Resources (HTTP client, store, relays) are created in lifespan().
    """
    app = FastAPI(
        title="Cinedock",
        description="Media catalog, stream resolution and same-origin HLS relay",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from cinedock.interfaces.api.catalog.router import router as catalog_router
    from cinedock.interfaces.api.stream.router import router as stream_router

    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(stream_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe — returns 200 as long as the process is running."""
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code if response is not None else 500,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
