"""Port for read access to the merged (store + files) catalog."""

from __future__ import annotations

from typing import Protocol

from cinedock.domain.entities.catalog import Catalog, Episode, Movie, Series


class CatalogRepositoryPort(Protocol):
    """Lookups over both catalog sources; store entries take precedence."""

    async def load_catalog(self) -> Catalog: ...

    async def find_movie(self, movie_id: str) -> Movie | None: ...

    async def find_episode(
        self, episode_id: str
    ) -> tuple[Series | None, Episode] | None:
        """Return ``(series, episode)``; ``series`` is None when unknown."""
        ...

    async def find_foreign_episode(
        self, episode_id: str
    ) -> tuple[Series | None, Episode] | None: ...

    async def find_foreign_series(self, series_id: str) -> Series | None: ...
