"""JSON presenter for catalog entities and stream descriptors.

Field names follow the browse UI's camelCase conventions.
"""

from __future__ import annotations

from typing import Any

from cinedock.domain.entities import (
    BunnyEmbedToken,
    Catalog,
    Episode,
    Movie,
    Series,
    StreamDescriptor,
    Subtitle,
)


def _subs(subs: tuple[Subtitle, ...]) -> list[dict[str, str]]:
    return [{"lang": s.lang, "label": s.label, "url": s.url} for s in subs]


def movie_to_json(movie: Movie) -> dict[str, Any]:
    return {
        "id": movie.id,
        "title": movie.title,
        "url": movie.url,
        "image": movie.image,
        "category": movie.category,
        "type": "movie",
        "source": movie.provenance.value,
    }


def episode_to_json(episode: Episode) -> dict[str, Any]:
    return {
        "id": episode.id,
        "seriesId": episode.series_id,
        "seriesTitle": episode.series_title,
        "title": episode.title,
        "ep": episode.number,
        "url": episode.url,
        "image": episode.image,
        "subs": _subs(episode.subs),
    }


def series_to_json(series: Series) -> dict[str, Any]:
    return {
        "id": series.id,
        "title": series.title,
        "image": series.image,
        "genre": series.genre,
        "count": series.count,
        "source": series.provenance.value,
        "episodes": [episode_to_json(e) for e in series.episodes],
    }


def catalog_to_json(catalog: Catalog) -> dict[str, Any]:
    return {
        "movies": [movie_to_json(m) for m in catalog.movies],
        "series": [series_to_json(s) for s in catalog.series],
        "foreignSeries": [series_to_json(s) for s in catalog.foreign_series],
    }


def descriptor_to_json(descriptor: StreamDescriptor) -> dict[str, Any]:
    """Stream payload; optional fields are omitted when empty."""
    payload: dict[str, Any] = {
        "title": descriptor.title,
        "url": descriptor.url,
        "kind": descriptor.kind.value,
    }
    if descriptor.image:
        payload["image"] = descriptor.image
    if descriptor.category:
        payload["category"] = descriptor.category
    if descriptor.subs:
        payload["subs"] = _subs(descriptor.subs)
    return payload


def bunny_token_to_json(signed: BunnyEmbedToken) -> dict[str, Any]:
    return {
        "token": signed.token,
        "expires": signed.expires,
        "libraryId": signed.library_id,
    }
