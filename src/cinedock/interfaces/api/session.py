"""Viewer session guard shared by the catalog and stream routers."""

from __future__ import annotations

from typing import cast

from fastapi import Request

from cinedock.interfaces.app_state import AppState


def ensure_session(request: Request) -> None:
    """Raise ``Unauthorized`` unless the request carries a valid session cookie.

    No-op when ``auth.require_session`` is disabled.
    """
    state = cast(AppState, request.app.state)
    auth = state.config.auth
    if not auth.require_session:
        return
    state.session_verifier.verify(request.cookies.get(auth.cookie_name))
