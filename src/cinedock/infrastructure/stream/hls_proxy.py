"""HLS proxy — manifest rewriting and origin fetching.

Media origins commonly reject requests without a same-origin looking
``Referer``, and browsers refuse cross-origin segment fetches.  The proxy
endpoint fetches each resource server-side with origin-derived headers
and rewrites every URI line of a manifest into another proxy request, so
variant playlists and segments resolve recursively through the same
endpoint without the player ever contacting the origin directly.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import quote, urljoin, urlparse

import httpx
import structlog

from cinedock.domain.entities.catalog import ProxiedResource
from cinedock.domain.entities.errors import InvalidRequest, UpstreamFailure

log = structlog.get_logger(__name__)

DEFAULT_MANIFEST_CONTENT_TYPE = "application/vnd.apple.mpegurl"

_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_MANIFEST_CT_MARKERS = ("mpegurl", "m3u8", "text")

# Characters encodeURIComponent leaves alone beyond quote()'s defaults.
_URI_COMPONENT_SAFE = "!*'()"

ProxyUrlBuilder = Callable[[str], str]


def cdn_base_from_url(video_url: str) -> str:
    """Extract the directory prefix of a URL (query string dropped).

    >>> cdn_base_from_url("https://ds7.dropcdn.io/hls2/01/yw6c47u0v5nb_h/master.m3u8?t=abc")
    'https://ds7.dropcdn.io/hls2/01/yw6c47u0v5nb_h/'
    """
    parsed = urlparse(video_url)
    path = parsed.path
    last_slash = path.rfind("/")
    base_path = path[: last_slash + 1] if last_slash >= 0 else "/"
    return f"{parsed.scheme}://{parsed.netloc}{base_path}"


def resolve_reference(ref: str, base_url: str) -> str:
    """Make a manifest reference absolute.

    Absolute ``http(s)`` URLs pass through.  Host-relative (``/a/b.ts``) and
    scheme-relative (``//cdn/b.ts``) references resolve with ``urljoin``;
    plain relative references are appended to *base_url*.
    """
    if _ABSOLUTE_URL_RE.match(ref):
        return ref
    if ref.startswith("/"):
        return urljoin(base_url, ref)
    return base_url + ref


def build_proxy_url(proxy_path: str) -> ProxyUrlBuilder:
    """Return a builder mapping an absolute URL to ``{proxy_path}?url=<encoded>``."""

    def _build(absolute_url: str) -> str:
        return f"{proxy_path}?url={quote(absolute_url, safe=_URI_COMPONENT_SAFE)}"

    return _build


def rewrite_manifest(content: str, base_url: str, proxy_url: ProxyUrlBuilder) -> str:
    """Rewrite every URI line of an HLS manifest into a proxy URL.

    Tag/comment lines (``#...``) and blank lines are kept byte-identical,
    line endings included.  Lines break on LF only (a trailing CR stays
    with its line), so separators such as U+2028 inside quoted tag
    attributes never split a tag.  Pure function, no network access.
    """
    lines = content.split("\n")
    for i, line in enumerate(lines):
        body = line[:-1] if line.endswith("\r") else line
        stripped = body.strip()
        if stripped and not stripped.startswith("#"):
            lines[i] = proxy_url(resolve_reference(stripped, base_url)) + line[len(body) :]
    return "\n".join(lines)


def is_manifest(content_type: str, url: str) -> bool:
    lowered = (content_type or "").lower()
    return any(m in lowered for m in _MANIFEST_CT_MARKERS) or ".m3u8" in url


def upstream_headers(url: str, user_agent: str) -> dict[str, str]:
    """Browser-like headers with Referer/Origin set to the target's own origin."""
    parsed = urlparse(url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    return {
        "User-Agent": user_agent,
        "Referer": origin,
        "Origin": origin,
    }


def validate_target_url(url: str | None) -> str:
    """Return the trimmed URL or raise ``InvalidRequest``."""
    target = (url or "").strip()
    if not target:
        raise InvalidRequest("URL parameter required")
    parsed = urlparse(target)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise InvalidRequest("Invalid url")
    return target


class HlsProxy:
    """Fetches one manifest or segment and prepares it for relay.

    Not retried: a failed fetch surfaces once, the player decides whether
    to retry.

    Args:
        http_client: Shared httpx client.
        user_agent: Browser-like User-Agent sent upstream.
        timeout_seconds: Bound for the whole upstream fetch.
        proxy_path: Path that rewritten manifest lines point at.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        user_agent: str,
        timeout_seconds: float,
        proxy_path: str,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._proxy_url = build_proxy_url(proxy_path)

    async def proxy(self, target_url: str | None) -> ProxiedResource:
        """Fetch *target_url*; rewrite manifests, pass everything else through.

        Relative manifest references resolve against the final URL after
        redirects, so a playlist moved to another origin still points at
        its own segments.

        Raises:
            InvalidRequest: Missing or non-http(s) URL.
            UpstreamFailure: Non-2xx upstream status (propagated) or a
                transport failure (500).
        """
        url = validate_target_url(target_url)

        try:
            resp = await self._http.get(
                url,
                headers=upstream_headers(url, self._user_agent),
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            log.warning("hls_proxy_fetch_failed", url=url, error=str(e))
            raise UpstreamFailure(f"Proxy error: {e}", status_code=500) from e

        if not resp.is_success:
            log.info("hls_proxy_upstream_status", url=url, status=resp.status_code)
            raise UpstreamFailure(
                f"Failed to fetch: {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        content_type = resp.headers.get("content-type") or DEFAULT_MANIFEST_CONTENT_TYPE

        if is_manifest(content_type, url):
            base_url = cdn_base_from_url(str(resp.url))
            body = rewrite_manifest(resp.text, base_url, self._proxy_url)
            log.debug("hls_proxy_manifest", url=url, size=len(body))
            return ProxiedResource(content_type=content_type, body=body)

        payload = resp.content
        log.debug("hls_proxy_segment", url=url, size_bytes=len(payload))
        return ProxiedResource(content_type=content_type, body=payload, is_binary=True)
