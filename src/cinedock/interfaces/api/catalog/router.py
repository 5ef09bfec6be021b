from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from cinedock.domain.entities import Unauthorized
from cinedock.interfaces.api.catalog.presenter import catalog_to_json
from cinedock.interfaces.api.session import ensure_session
from cinedock.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["catalog"])

_NO_STORE = {"Cache-Control": "no-store"}


@router.get("/catalog")
async def catalog(request: Request) -> JSONResponse:
    """Merged catalog (store entries first, then flat-file entries)."""
    state = cast(AppState, request.app.state)

    try:
        ensure_session(request)
    except Unauthorized as e:
        return JSONResponse({"error": str(e)}, status_code=401, headers=_NO_STORE)

    result = await state.catalog_uc.list()
    return JSONResponse(catalog_to_json(result), headers=_NO_STORE)
