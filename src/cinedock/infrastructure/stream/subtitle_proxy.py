"""Same-origin relay for WebVTT subtitle files.

Browsers only attach ``<track>`` elements from a foreign origin when that
origin sends CORS headers, which most file hosts do not.  Subtitles are
small text files, fetched whole and returned as text.
"""

from __future__ import annotations

from urllib.parse import urlparse

import httpx
import structlog

from cinedock.domain.entities.errors import InvalidRequest, UpstreamFailure

log = structlog.get_logger(__name__)

VTT_CONTENT_TYPE = "text/vtt; charset=utf-8"


class SubtitleProxy:
    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        user_agent: str,
        timeout_seconds: float,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent
        self._timeout = timeout_seconds

    async def fetch(self, url: str | None) -> str:
        """Return the subtitle body.

        Raises:
            InvalidRequest: Missing or non-https URL.
            UpstreamFailure: 502 on a non-2xx upstream, 500 on transport errors.
        """
        target = (url or "").strip()
        if not target:
            raise InvalidRequest("Missing url")
        parsed = urlparse(target)
        if parsed.scheme.lower() != "https" or not parsed.netloc:
            raise InvalidRequest("Invalid url")

        try:
            resp = await self._http.get(
                target,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "text/vtt,*/*",
                },
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            log.warning("subtitle_fetch_failed", url=target, error=str(e))
            raise UpstreamFailure("Server error", status_code=500) from e

        if not resp.is_success:
            log.info("subtitle_upstream_status", url=target, status=resp.status_code)
            raise UpstreamFailure("Failed to fetch subtitle", status_code=502)

        log.debug("subtitle_relayed", url=target, size=len(resp.content))
        return resp.text
