from __future__ import annotations


class CatalogError(Exception):
    """Base error for catalog/stream domain and use cases."""


class InvalidRequest(CatalogError):
    """Missing or malformed input (4xx)."""


class NotFound(CatalogError):
    """No catalog entry matches the requested ID."""


class Unauthorized(CatalogError):
    """Missing or invalid viewer session."""


class UpstreamFailure(CatalogError):
    """Network / upstream errors (media origin, subtitle host).

    ``status_code`` is the status to surface to the caller: the upstream
    status for non-2xx responses, 500 for transport failures.
    """

    def __init__(self, message: str, *, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceMisconfigured(CatalogError):
    """A feature was called whose credentials are not configured (500)."""
