"""Playback-kind classification for catalog URLs.

Substring heuristics: a URL carrying ``.m3u8`` only in its query string
still classifies as HLS, and an MP4 served without a ``.mp4`` suffix falls
through to the HLS default.
"""

from __future__ import annotations

import re

from cinedock.domain.entities.catalog import StreamKind

_BUNNY_GUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

_VIDEAS_MARKERS = ("videas.fr/embed/",)
_BUNNY_MARKERS = ("player.mediadelivery.net/embed/", "iframe.mediadelivery.net")


def is_bunny_guid(value: str) -> bool:
    """True for a bare Bunny Stream video GUID (no URL around it)."""
    return bool(_BUNNY_GUID_RE.match((value or "").strip()))


def detect_kind(url: str) -> StreamKind:
    """Classify *url*; undecorated sources default to HLS (usually a redirect)."""
    lowered = (url or "").lower()

    if any(marker in lowered for marker in _VIDEAS_MARKERS):
        return StreamKind.VIDEAS_EMBED
    if any(marker in lowered for marker in _BUNNY_MARKERS) or is_bunny_guid(url):
        return StreamKind.BUNNY_EMBED
    if ".m3u8" in lowered:
        return StreamKind.HLS
    if ".mp4" in lowered:
        return StreamKind.MP4
    return StreamKind.HLS
