"""Stream resolution use case — content ID to playable stream descriptor."""

from __future__ import annotations

import structlog

from cinedock.domain.entities import (
    Episode,
    InvalidRequest,
    NotFound,
    Series,
    StreamDescriptor,
)
from cinedock.domain.ports import CatalogRepositoryPort
from cinedock.infrastructure.stream.kind import detect_kind

log = structlog.get_logger(__name__)

MOVIE_PREFIX = "m_"
EPISODE_PREFIX = "e_"
FOREIGN_EPISODE_PREFIX = "fe_"
FOREIGN_SERIES_PREFIX = "f_"


def _episode_descriptor(
    series: Series | None, episode: Episode, fallback_category: str
) -> StreamDescriptor:
    series_title = series.title if series is not None else episode.series_title
    title = f"{series_title} - {episode.title}" if series_title else episode.title
    image = episode.image or (series.image if series is not None else "")
    return StreamDescriptor(
        title=title,
        url=episode.url,
        kind=detect_kind(episode.url),
        image=image,
        category=(series.genre if series is not None else "") or fallback_category,
        subs=episode.subs,
    )


class StreamResolveUseCase:
    """Resolves a catalog ID into a ``StreamDescriptor``.

    Dispatch is keyed on the ID prefix:

    - ``m_``  movie
    - ``e_``  series episode
    - ``fe_`` foreign-series episode
    - ``f_``  foreign series (plays its first episode)

    Each branch asks the repository, which tries the mutable store before
    the flat files.  Episodes whose series carries no genre report the
    locale label of their section as category.
    """

    def __init__(
        self,
        catalog: CatalogRepositoryPort,
        *,
        series_category: str = "",
        foreign_category: str = "",
    ) -> None:
        self._catalog = catalog
        self._series_category = series_category
        self._foreign_category = foreign_category

    async def resolve(self, content_id: str | None) -> StreamDescriptor:
        """Resolve *content_id*.

        Raises:
            InvalidRequest: Empty ID or unknown prefix.
            NotFound: Well-formed ID absent from both sources.
        """
        cid = (content_id or "").strip()
        if not cid:
            raise InvalidRequest("Missing id")

        if cid.startswith(MOVIE_PREFIX):
            descriptor = await self._resolve_movie(cid)
        elif cid.startswith(EPISODE_PREFIX):
            descriptor = await self._resolve_episode(cid)
        elif cid.startswith(FOREIGN_EPISODE_PREFIX):
            descriptor = await self._resolve_foreign_episode(cid)
        elif cid.startswith(FOREIGN_SERIES_PREFIX):
            descriptor = await self._resolve_foreign_series(cid)
        else:
            raise InvalidRequest("Invalid id")

        if descriptor is None:
            log.info("stream_not_found", id=cid)
            raise NotFound("Not found")

        log.info("stream_resolved", id=cid, kind=descriptor.kind.value)
        return descriptor

    async def _resolve_movie(self, movie_id: str) -> StreamDescriptor | None:
        movie = await self._catalog.find_movie(movie_id)
        if movie is None:
            return None
        return StreamDescriptor(
            title=movie.title,
            url=movie.url,
            kind=detect_kind(movie.url),
            image=movie.image,
            category=movie.category,
        )

    async def _resolve_episode(self, episode_id: str) -> StreamDescriptor | None:
        hit = await self._catalog.find_episode(episode_id)
        if hit is None:
            return None
        return _episode_descriptor(*hit, self._series_category)

    async def _resolve_foreign_episode(self, episode_id: str) -> StreamDescriptor | None:
        hit = await self._catalog.find_foreign_episode(episode_id)
        if hit is None:
            return None
        return _episode_descriptor(*hit, self._foreign_category)

    async def _resolve_foreign_series(self, series_id: str) -> StreamDescriptor | None:
        series = await self._catalog.find_foreign_series(series_id)
        if series is None or not series.episodes:
            return None
        return _episode_descriptor(series, series.episodes[0], self._foreign_category)
