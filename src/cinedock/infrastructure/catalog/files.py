"""Flat-file catalog source (read-only, bundled with the deployment)."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from cinedock.domain.ports.catalog_files import CatalogFileKind
from cinedock.infrastructure.config.schema import CatalogConfig

log = structlog.get_logger(__name__)


class FlatFileCatalog:
    """Reads the three catalog text files from ``catalog.data_dir``.

    Implements ``CatalogFilesPort``.  Files are read fresh on every call;
    a missing or undecodable file reads as empty.
    """

    def __init__(self, config: CatalogConfig) -> None:
        self._paths: dict[CatalogFileKind, Path] = {
            "movies": config.data_dir / config.movies_file,
            "series": config.data_dir / config.series_file,
            "foreign": config.data_dir / config.foreign_file,
        }

    def path_for(self, kind: CatalogFileKind) -> Path:
        return self._paths[kind]

    async def read(self, kind: CatalogFileKind) -> str:
        path = self._paths[kind]
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
        except FileNotFoundError:
            log.debug("catalog_file_missing", kind=kind, path=str(path))
            return ""
        except (OSError, UnicodeDecodeError):
            log.warning("catalog_file_unreadable", kind=kind, path=str(path), exc_info=True)
            return ""
