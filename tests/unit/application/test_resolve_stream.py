"""Tests for StreamResolveUseCase."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from cinedock.application.use_cases import StreamResolveUseCase
from cinedock.domain.entities import (
    Episode,
    InvalidRequest,
    NotFound,
    Series,
    StreamKind,
    Subtitle,
)
from cinedock.infrastructure.catalog.ids import foreign_series_id, movie_id
from cinedock.infrastructure.catalog.store import CatalogStore

_INCEPTION_URL = "https://cdn.example.com/inception/master.m3u8"
_INCEPTION_ID = movie_id("Inception", _INCEPTION_URL)


@pytest.fixture()
def resolver(empty_kv, fake_files, catalog_config) -> StreamResolveUseCase:
    return StreamResolveUseCase(
        CatalogStore(kv=empty_kv, files=fake_files, config=catalog_config)
    )


class TestValidation:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("cid", [None, "", "   "])
    async def test_empty_id(self, resolver: StreamResolveUseCase, cid) -> None:
        with pytest.raises(InvalidRequest):
            await resolver.resolve(cid)

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("cid", ["x_123", "s_123", "movie", "M_61"])
    async def test_unknown_prefix(self, resolver: StreamResolveUseCase, cid) -> None:
        with pytest.raises(InvalidRequest):
            await resolver.resolve(cid)

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("cid", ["m_deadbeef", "e_deadbeef", "fe_deadbeef", "f_deadbeef"])
    async def test_not_found(self, resolver: StreamResolveUseCase, cid: str) -> None:
        with pytest.raises(NotFound):
            await resolver.resolve(cid)


class TestMovies:
    @pytest.mark.asyncio()
    async def test_file_movie(self, resolver: StreamResolveUseCase) -> None:
        d = await resolver.resolve(f"  {_INCEPTION_ID} ")
        assert d.title == "Inception"
        assert d.url == _INCEPTION_URL
        assert d.kind is StreamKind.HLS
        assert d.image == "https://img.example.com/inception.jpg"
        assert d.category == "Sci-Fi"

    @pytest.mark.asyncio()
    async def test_mp4_movie(self, resolver: StreamResolveUseCase) -> None:
        d = await resolver.resolve(
            movie_id("The Matrix", "https://cdn.example.com/matrix.mp4")
        )
        assert d.kind is StreamKind.MP4

    @pytest.mark.asyncio()
    async def test_store_wins_over_file(
        self, kv_factory, fake_files, catalog_config
    ) -> None:
        kv = kv_factory(
            {
                f"movie:{_INCEPTION_ID}": {
                    "id": _INCEPTION_ID,
                    "title": "Inception (Director's Cut)",
                    "url": "https://videas.fr/embed/abc",
                }
            }
        )
        uc = StreamResolveUseCase(
            CatalogStore(kv=kv, files=fake_files, config=catalog_config)
        )
        d = await uc.resolve(_INCEPTION_ID)
        assert d.title == "Inception (Director's Cut)"
        assert d.url == "https://videas.fr/embed/abc"
        assert d.kind is StreamKind.VIDEAS_EMBED


class TestEpisodes:
    @pytest.mark.asyncio()
    async def test_file_episode_title_and_poster(
        self, resolver: StreamResolveUseCase, empty_kv, fake_files, catalog_config
    ) -> None:
        store = CatalogStore(kv=empty_kv, files=fake_files, config=catalog_config)
        (dark,) = (await store.load_catalog()).series
        first = dark.episodes[0]

        d = await resolver.resolve(first.id)
        assert d.title == "Dark - الحلقة 01"
        assert d.url == "https://cdn.example.com/dark/1.m3u8"
        assert d.image == "https://img.example.com/dark.jpg"
        assert d.category == "Drama"

    @pytest.mark.asyncio()
    async def test_store_episode_subs(
        self, kv_factory, fake_files, catalog_config
    ) -> None:
        kv = kv_factory(
            {
                "episode:e_store": {
                    "id": "e_store",
                    "seriesTitle": "Alpha",
                    "title": "Episode 3",
                    "url": "https://cdn.example.com/a/3.m3u8",
                    "subs": json.dumps(
                        [{"lang": "ar", "label": "AR", "url": "https://s/3.vtt"}]
                    ),
                }
            }
        )
        uc = StreamResolveUseCase(
            CatalogStore(kv=kv, files=fake_files, config=catalog_config)
        )
        d = await uc.resolve("e_store")
        assert d.title == "Alpha - Episode 3"
        assert d.subs == (Subtitle(lang="ar", label="AR", url="https://s/3.vtt"),)

    @pytest.mark.asyncio()
    async def test_malformed_subs_degrade(
        self, kv_factory, fake_files, catalog_config
    ) -> None:
        kv = kv_factory(
            {
                "episode:fe_store": {
                    "id": "fe_store",
                    "seriesTitle": "Lupin",
                    "title": "EP 9",
                    "url": "https://cdn.example.com/l/9.m3u8",
                    "subs": "[{broken",
                }
            }
        )
        uc = StreamResolveUseCase(
            CatalogStore(kv=kv, files=fake_files, config=catalog_config)
        )
        d = await uc.resolve("fe_store")
        assert d.subs == ()
        assert d.kind is StreamKind.HLS


class TestForeign:
    @pytest.mark.asyncio()
    async def test_series_id_plays_first_episode(
        self, resolver: StreamResolveUseCase
    ) -> None:
        d = await resolver.resolve(foreign_series_id("Lupin"))
        assert d.url == "https://iframe.mediadelivery.net/embed/123/abc"
        assert d.kind is StreamKind.BUNNY_EMBED
        assert d.title == "Lupin - EP 1"
        assert d.subs == (
            Subtitle(lang="en", label="EN", url="https://subs.example.com/1.vtt"),
        )

    @pytest.mark.asyncio()
    async def test_episode_image_falls_back_to_series(self) -> None:
        episode = Episode(
            id="fe_1",
            series_id="f_1",
            series_title="Lupin",
            label="EP 2",
            title="EP 2",
            url="https://cdn.example.com/2.m3u8",
        )
        series = Series(
            id="f_1", title="Lupin", image="https://img/lupin.jpg", episodes=(episode,)
        )
        catalog = AsyncMock()
        catalog.find_foreign_episode = AsyncMock(return_value=(series, episode))

        d = await StreamResolveUseCase(catalog).resolve("fe_1")
        assert d.image == "https://img/lupin.jpg"
        catalog.find_foreign_episode.assert_awaited_once_with("fe_1")

    @pytest.mark.asyncio()
    async def test_series_without_episodes_not_found(self) -> None:
        catalog = AsyncMock()
        catalog.find_foreign_series = AsyncMock(
            return_value=Series(id="f_1", title="Empty")
        )
        with pytest.raises(NotFound):
            await StreamResolveUseCase(catalog).resolve("f_1")


class TestSectionCategory:
    @pytest.mark.asyncio()
    async def test_foreign_episode_without_genre_uses_section_label(
        self, empty_kv, fake_files, catalog_config
    ) -> None:
        uc = StreamResolveUseCase(
            CatalogStore(kv=empty_kv, files=fake_files, config=catalog_config),
            series_category=catalog_config.series_category,
            foreign_category=catalog_config.foreign_category,
        )
        d = await uc.resolve(foreign_series_id("Lupin"))
        assert d.category == "مسلسل أجنبي"

    @pytest.mark.asyncio()
    async def test_store_episode_without_series_uses_section_label(
        self, kv_factory, fake_files, catalog_config
    ) -> None:
        kv = kv_factory(
            {
                "episode:e_store": {
                    "id": "e_store",
                    "seriesTitle": "Alpha",
                    "title": "Episode 3",
                    "url": "https://cdn.example.com/a/3.m3u8",
                }
            }
        )
        uc = StreamResolveUseCase(
            CatalogStore(kv=kv, files=fake_files, config=catalog_config),
            series_category="Series",
        )
        d = await uc.resolve("e_store")
        assert d.category == "Series"

    @pytest.mark.asyncio()
    async def test_series_genre_wins_over_section_label(
        self, empty_kv, fake_files, catalog_config
    ) -> None:
        store = CatalogStore(kv=empty_kv, files=fake_files, config=catalog_config)
        (dark,) = (await store.load_catalog()).series
        uc = StreamResolveUseCase(store, series_category="Series")
        d = await uc.resolve(dark.episodes[0].id)
        assert d.category == "Drama"
