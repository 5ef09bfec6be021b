"""Stream resolution and same-origin relay endpoints."""

from __future__ import annotations

import json
from typing import cast

import structlog
from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from cinedock.domain.entities import (
    InvalidRequest,
    NotFound,
    ServiceMisconfigured,
    Unauthorized,
    UpstreamFailure,
)
from cinedock.infrastructure.stream.subtitle_proxy import VTT_CONTENT_TYPE
from cinedock.interfaces.api.catalog.presenter import (
    bunny_token_to_json,
    descriptor_to_json,
)
from cinedock.interfaces.api.session import ensure_session
from cinedock.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stream"])

_CORS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}


def _text(message: str, *, status_code: int) -> Response:
    return Response(
        content=message,
        media_type="text/plain",
        status_code=status_code,
        headers=_CORS,
    )


@router.get("/stream")
async def stream(
    request: Request,
    id: str | None = Query(None, description="Catalog content ID"),
) -> JSONResponse:
    state = cast(AppState, request.app.state)

    try:
        ensure_session(request)
        descriptor = await state.stream_uc.resolve(id)
    except Unauthorized as e:
        return JSONResponse({"error": str(e)}, status_code=401)
    except InvalidRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except NotFound as e:
        return JSONResponse({"error": str(e)}, status_code=404)

    return JSONResponse(
        descriptor_to_json(descriptor),
        headers={"Cache-Control": "no-store"},
    )


@router.post("/bunny-token")
async def bunny_token(request: Request) -> JSONResponse:
    """Sign a Bunny Stream embed; body ``{"videoId": "<guid>"}``."""
    state = cast(AppState, request.app.state)

    try:
        ensure_session(request)
        try:
            body = json.loads(await request.body() or b"{}")
        except ValueError as e:
            raise InvalidRequest("Invalid request body") from e
        video_id = body.get("videoId") if isinstance(body, dict) else None
        signed = state.bunny_signer.sign(None if video_id is None else str(video_id))
    except Unauthorized as e:
        return JSONResponse({"error": str(e)}, status_code=401)
    except InvalidRequest as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except ServiceMisconfigured as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse(
        bunny_token_to_json(signed),
        headers={"Cache-Control": "no-store"},
    )


@router.options("/hls-proxy")
async def hls_proxy_preflight() -> Response:
    return Response(status_code=200, headers=_CORS)


@router.get("/hls-proxy")
async def hls_proxy(
    request: Request,
    url: str | None = Query(None, description="Absolute manifest or segment URL"),
) -> Response:
    """Relay one HLS resource; manifests come back with rewritten URI lines."""
    state = cast(AppState, request.app.state)

    try:
        ensure_session(request)
        resource = await state.hls_proxy.proxy(url)
    except Unauthorized as e:
        return _text(str(e), status_code=401)
    except InvalidRequest as e:
        return _text(str(e), status_code=400)
    except UpstreamFailure as e:
        return _text(str(e), status_code=e.status_code)

    headers = {
        **_CORS,
        "Cache-Control": f"public, max-age={state.config.proxy.cache_max_age}",
    }
    if resource.is_binary:
        headers["X-Proxy-Binary"] = "1"
    return Response(
        content=resource.payload,
        media_type=resource.content_type,
        headers=headers,
    )


@router.get("/subtitle")
async def subtitle(
    request: Request,
    url: str | None = Query(None, description="https URL of a WebVTT file"),
) -> Response:
    state = cast(AppState, request.app.state)

    try:
        body = await state.subtitle_proxy.fetch(url)
    except InvalidRequest as e:
        return _text(str(e), status_code=400)
    except UpstreamFailure as e:
        return _text(str(e), status_code=e.status_code)

    return Response(
        content=body,
        headers={
            **_CORS,
            "Content-Type": VTT_CONTENT_TYPE,
            "Cache-Control": (
                f"public, max-age={state.config.proxy.subtitle_cache_max_age}"
            ),
        },
    )
