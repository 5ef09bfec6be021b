"""Dual-source catalog: mutable key-attribute store + static flat files.

Store layout (written by the admin collaborator):

    catalog:movies            set   movie IDs
    catalog:series            set   series IDs
    catalog:foreign           set   foreign series IDs
    movie:{id}                hash  id, title, url, image, category
    series:{id}               hash  id, title, image, genre
    series:{id}:episodes      set   episode IDs
    episode:{id}              hash  id, seriesId, seriesTitle, title, url,
                                    image, genre, subs (JSON list), type

Store entries are authoritative: they come first in every merged list and
point lookups try the store before the files.  Either source failing
degrades to an empty contribution.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Mapping
from typing import TypeVar

import structlog

from cinedock.domain.entities.catalog import (
    Catalog,
    Episode,
    Movie,
    Provenance,
    Series,
    Subtitle,
)
from cinedock.domain.ports.catalog_files import CatalogFilesPort
from cinedock.domain.ports.kv_store import KeyValueStorePort
from cinedock.infrastructure.catalog.parser import (
    extract_episode_number,
    parse_foreign,
    parse_movies,
    parse_series,
    sort_episodes,
    sort_series,
)
from cinedock.infrastructure.config.schema import CatalogConfig

log = structlog.get_logger(__name__)

_T = TypeVar("_T")

MOVIES_SET = "catalog:movies"
SERIES_SET = "catalog:series"
FOREIGN_SET = "catalog:foreign"


def movie_key(movie_id: str) -> str:
    return f"movie:{movie_id}"


def series_key(series_id: str) -> str:
    return f"series:{series_id}"


def series_episodes_key(series_id: str) -> str:
    return f"series:{series_id}:episodes"


def episode_key(episode_id: str) -> str:
    return f"episode:{episode_id}"


def decode_subs(raw: str | None) -> tuple[Subtitle, ...]:
    """Deserialize the JSON ``subs`` field; malformed data yields ``()``."""
    if not raw:
        return ()
    try:
        data = json.loads(raw)
    except ValueError:
        log.debug("subs_decode_failed", raw=raw[:80])
        return ()
    if not isinstance(data, list):
        return ()

    subs: list[Subtitle] = []
    for idx, item in enumerate(data, start=1):
        if not isinstance(item, Mapping) or not item.get("url"):
            continue
        subs.append(
            Subtitle(
                lang=str(item.get("lang") or f"s{idx}"),
                label=str(item.get("label") or f"SUB {idx}"),
                url=str(item["url"]),
            )
        )
    return tuple(subs)


def movie_from_hash(data: Mapping[str, str], *, default_category: str) -> Movie | None:
    title = (data.get("title") or "").strip()
    url = (data.get("url") or "").strip()
    movie_id = data.get("id") or ""
    if not (title and url and movie_id):
        return None
    return Movie(
        id=movie_id,
        title=title,
        url=url,
        image=data.get("image") or "",
        category=data.get("category") or default_category,
        provenance=Provenance.STORE,
    )


def episode_from_hash(data: Mapping[str, str]) -> Episode | None:
    url = (data.get("url") or "").strip()
    episode_id = data.get("id") or ""
    if not (url and episode_id):
        return None
    label = (data.get("title") or "").strip()
    return Episode(
        id=episode_id,
        series_id=data.get("seriesId") or "",
        series_title=(data.get("seriesTitle") or "").strip(),
        label=label,
        title=label,
        url=url,
        number=extract_episode_number(label),
        image=data.get("image") or "",
        subs=decode_subs(data.get("subs")),
        provenance=Provenance.STORE,
    )


async def _degrade(source: str, coro: Awaitable[list[_T]]) -> list[_T]:
    """Await one source; any failure contributes an empty list."""
    try:
        return await coro
    except Exception:
        log.warning("catalog_source_failed", source=source, exc_info=True)
        return []


class CatalogStore:
    """Merges the mutable store and the flat files into one catalog.

    Nothing is cached: every call reads both sources fresh.
    """

    def __init__(
        self,
        *,
        kv: KeyValueStorePort,
        files: CatalogFilesPort,
        config: CatalogConfig,
    ) -> None:
        self._kv = kv
        self._files = files
        self._config = config

    # ------------------------------------------------------------------
    # Store readers
    # ------------------------------------------------------------------

    async def _store_movies(self) -> list[Movie]:
        ids = await self._kv.smembers(MOVIES_SET)
        hashes = await asyncio.gather(*(self._kv.hgetall(movie_key(i)) for i in ids))
        movies = []
        for data in hashes:
            movie = movie_from_hash(data, default_category=self._config.movie_category)
            if movie is not None:
                movies.append(movie)
        return movies

    async def _store_series_one(self, series_id: str) -> Series | None:
        info, episode_ids = await asyncio.gather(
            self._kv.hgetall(series_key(series_id)),
            self._kv.smembers(series_episodes_key(series_id)),
        )
        hashes = await asyncio.gather(
            *(self._kv.hgetall(episode_key(e)) for e in episode_ids)
        )
        episodes = [ep for ep in map(episode_from_hash, hashes) if ep is not None]

        title = (info.get("title") or "").strip()
        if not title and episodes:
            title = episodes[0].series_title
        if not title or not episodes:
            return None
        return Series(
            id=info.get("id") or series_id,
            title=title,
            image=info.get("image") or "",
            genre=info.get("genre") or "",
            episodes=sort_episodes(episodes),
            provenance=Provenance.STORE,
        )

    async def _store_series(self, set_key: str) -> list[Series]:
        ids = await self._kv.smembers(set_key)
        found = await asyncio.gather(*(self._store_series_one(i) for i in ids))
        return sort_series(s for s in found if s is not None)

    # ------------------------------------------------------------------
    # File readers
    # ------------------------------------------------------------------

    async def _file_movies(self) -> list[Movie]:
        return parse_movies(
            await self._files.read("movies"),
            default_category=self._config.movie_category,
        )

    async def _file_series(self) -> list[Series]:
        return parse_series(
            await self._files.read("series"),
            episode_title_template=self._config.episode_title_template,
        )

    async def _file_foreign(self) -> list[Series]:
        return parse_foreign(await self._files.read("foreign"))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load_catalog(self) -> Catalog:
        """Merged catalog; store entries first, then file entries.

        Duplicates across sources are kept (first match wins for consumers
        that index by ID).
        """
        (
            store_movies,
            store_series,
            store_foreign,
            file_movies,
            file_series,
            file_foreign,
        ) = await asyncio.gather(
            _degrade("store_movies", self._store_movies()),
            _degrade("store_series", self._store_series(SERIES_SET)),
            _degrade("store_foreign", self._store_series(FOREIGN_SET)),
            _degrade("file_movies", self._file_movies()),
            _degrade("file_series", self._file_series()),
            _degrade("file_foreign", self._file_foreign()),
        )
        catalog = Catalog(
            movies=store_movies + file_movies,
            series=store_series + file_series,
            foreign_series=store_foreign + file_foreign,
        )
        log.info(
            "catalog_loaded",
            store_movies=len(store_movies),
            file_movies=len(file_movies),
            store_series=len(store_series),
            file_series=len(file_series),
            store_foreign=len(store_foreign),
            file_foreign=len(file_foreign),
        )
        return catalog

    async def find_movie(self, movie_id: str) -> Movie | None:
        data = await self._kv.hgetall(movie_key(movie_id))
        movie = movie_from_hash(data, default_category=self._config.movie_category)
        if movie is not None:
            return movie

        for movie in await self._file_movies():
            if movie.id == movie_id:
                return movie
        return None

    async def _find_store_episode(self, episode_id: str) -> tuple[Series | None, Episode] | None:
        episode = episode_from_hash(await self._kv.hgetall(episode_key(episode_id)))
        if episode is None:
            return None
        return None, episode

    @staticmethod
    def _scan_episodes(
        series_list: list[Series], episode_id: str
    ) -> tuple[Series | None, Episode] | None:
        for series in series_list:
            for episode in series.episodes:
                if episode.id == episode_id:
                    return series, episode
        return None

    async def find_episode(self, episode_id: str) -> tuple[Series | None, Episode] | None:
        """Series episode by ID; the series is None for store hits."""
        hit = await self._find_store_episode(episode_id)
        if hit is not None:
            return hit
        return self._scan_episodes(await self._file_series(), episode_id)

    async def find_foreign_episode(
        self, episode_id: str
    ) -> tuple[Series | None, Episode] | None:
        hit = await self._find_store_episode(episode_id)
        if hit is not None:
            return hit
        return self._scan_episodes(await self._file_foreign(), episode_id)

    async def find_foreign_series(self, series_id: str) -> Series | None:
        series = await self._store_series_one(series_id)
        if series is not None:
            return series

        for series in await self._file_foreign():
            if series.id == series_id:
                return series
        return None
