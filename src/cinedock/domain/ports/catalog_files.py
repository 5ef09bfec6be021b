"""Port for the static, line-oriented catalog files."""

from __future__ import annotations

from typing import Literal, Protocol

CatalogFileKind = Literal["movies", "series", "foreign"]


class CatalogFilesPort(Protocol):
    """Read access to the flat-file catalog sources."""

    async def read(self, kind: CatalogFileKind) -> str:
        """Return the raw file text.

        A missing or unreadable file yields ``""`` (never raises).
        """
        ...
