"""Port for viewer session verification."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionVerifierPort(Protocol):
    """Validates a session token issued by the login collaborator."""

    def verify(self, token: str | None) -> dict[str, Any]:
        """Return the session claims.

        Raises ``Unauthorized`` when the token is absent, expired or invalid.
        """
        ...
