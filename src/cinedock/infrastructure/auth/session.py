"""JWT-backed viewer session verification.

Sessions are issued by the login collaborator as HMAC-signed JWTs stored in
a cookie; this service only checks them.
"""

from __future__ import annotations

from typing import Any

import jwt
import structlog

from cinedock.domain.entities.errors import Unauthorized
from cinedock.infrastructure.config.schema import AuthConfig

log = structlog.get_logger(__name__)


class JwtSessionVerifier:
    """Validates session cookies against the shared secret.

    Without a configured secret every token is rejected.
    """

    def __init__(self, config: AuthConfig) -> None:
        self._secret = config.jwt_secret
        self._algorithms = list(config.jwt_algorithms)

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def verify(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise Unauthorized("Not logged in")
        if not self._secret:
            log.warning("session_secret_missing")
            raise Unauthorized("Unauthorized")

        try:
            claims = jwt.decode(token, self._secret, algorithms=self._algorithms)
        except jwt.ExpiredSignatureError as e:
            raise Unauthorized("Session expired") from e
        except jwt.InvalidTokenError as e:
            log.debug("session_invalid", error=str(e))
            raise Unauthorized("Invalid session") from e
        return claims
