"""Catalog listing use case — merged catalog for the browse UI."""

from __future__ import annotations

import structlog

from cinedock.domain.entities import Catalog
from cinedock.domain.ports import CatalogRepositoryPort

log = structlog.get_logger(__name__)


class CatalogListingUseCase:
    """Lists movies, series and foreign series from both catalog sources.

    Source failures are absorbed by the repository, so this never fails
    because one backing source is down.
    """

    def __init__(self, catalog: CatalogRepositoryPort) -> None:
        self._catalog = catalog

    async def list(self) -> Catalog:
        catalog = await self._catalog.load_catalog()
        log.debug(
            "catalog_listed",
            movies=len(catalog.movies),
            series=len(catalog.series),
            foreign_series=len(catalog.foreign_series),
        )
        return catalog
