"""Bunny Stream embed token signing.

Libraries with token authentication only play an embed whose URL carries
``token`` and ``expires``; the token is
``sha256_hex(security_key + video_id + expires)``.  A bare video GUID in
the catalog carries no library ID, so the library ID is returned too.
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable

import structlog

from cinedock.domain.entities import (
    BunnyEmbedToken,
    InvalidRequest,
    ServiceMisconfigured,
)
from cinedock.infrastructure.config.schema import BunnyConfig

log = structlog.get_logger(__name__)


def sign_embed(security_key: str, video_id: str, expires: int) -> str:
    """Hex SHA-256 signature for one embed."""
    return hashlib.sha256(f"{security_key}{video_id}{expires}".encode()).hexdigest()


class BunnyTokenSigner:
    """Issues time-limited embed tokens for the configured library.

    Args:
        config: Library ID, security key and token lifetime.
        clock: Returns the current unix time in seconds.
    """

    def __init__(
        self, config: BunnyConfig, *, clock: Callable[[], float] = time.time
    ) -> None:
        self._library_id = config.library_id or ""
        self._security_key = config.security_key or ""
        self._ttl = config.token_ttl_seconds
        self._clock = clock

    @property
    def configured(self) -> bool:
        return bool(self._library_id and self._security_key)

    def sign(self, video_id: str | None) -> BunnyEmbedToken:
        """Sign *video_id*.

        Raises:
            InvalidRequest: Empty video ID.
            ServiceMisconfigured: Library ID or security key missing.
        """
        vid = (video_id or "").strip()
        if not vid:
            raise InvalidRequest("videoId required")
        if not self.configured:
            log.error("bunny_credentials_missing")
            raise ServiceMisconfigured("Server configuration error")

        expires = int(self._clock()) + self._ttl
        log.debug("bunny_token_signed", video_id=vid, expires=expires)
        return BunnyEmbedToken(
            token=sign_embed(self._security_key, vid, expires),
            expires=expires,
            library_id=self._library_id,
        )
