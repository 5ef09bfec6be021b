"""Tests for catalog domain entities."""

from __future__ import annotations

import dataclasses

import pytest

from cinedock.domain.entities import (
    Catalog,
    Episode,
    Movie,
    ProxiedResource,
    Provenance,
    Series,
    StreamDescriptor,
    StreamKind,
    UpstreamFailure,
)


def _episode(n: int) -> Episode:
    return Episode(
        id=f"e_{n}",
        series_id="s_1",
        series_title="Dark",
        label=f"Episode {n}",
        title=f"Episode {n}",
        url=f"https://cdn.example.com/{n}.m3u8",
        number=n,
    )


class TestMovie:
    def test_defaults(self) -> None:
        movie = Movie(id="m_1", title="Inception", url="https://x/v.m3u8")
        assert movie.image == ""
        assert movie.category == ""
        assert movie.provenance is Provenance.FILE

    def test_frozen(self) -> None:
        movie = Movie(id="m_1", title="Inception", url="https://x/v.m3u8")
        with pytest.raises(dataclasses.FrozenInstanceError):
            movie.title = "Other"  # type: ignore[misc]


class TestSeries:
    def test_count_reflects_episodes(self) -> None:
        series = Series(id="s_1", title="Dark", episodes=(_episode(1), _episode(2)))
        assert series.count == 2

    def test_empty_series(self) -> None:
        assert Series(id="s_1", title="Dark").count == 0


class TestCatalog:
    def test_default_lists_are_independent(self) -> None:
        a, b = Catalog(), Catalog()
        a.movies.append(Movie(id="m_1", title="A", url="u"))
        assert b.movies == []


class TestStreamKind:
    def test_values_are_wire_strings(self) -> None:
        assert StreamKind.HLS.value == "hls"
        assert StreamKind.MP4.value == "mp4"
        assert StreamKind.BUNNY_EMBED.value == "bunny_embed"
        assert StreamKind.VIDEAS_EMBED.value == "videas_embed"

    def test_descriptor_defaults(self) -> None:
        d = StreamDescriptor(title="T", url="https://x/v.mp4", kind=StreamKind.MP4)
        assert d.subs == ()
        assert d.image == ""


class TestProxiedResource:
    def test_text_payload_is_utf8(self) -> None:
        res = ProxiedResource(content_type="application/vnd.apple.mpegurl", body="#EXTM3U\n")
        assert res.payload == b"#EXTM3U\n"
        assert res.is_binary is False

    def test_binary_payload_is_the_same_bytes(self) -> None:
        raw = bytes(range(256))
        res = ProxiedResource(content_type="video/mp2t", body=raw, is_binary=True)
        assert res.payload is raw


class TestUpstreamFailure:
    def test_default_status_is_500(self) -> None:
        assert UpstreamFailure("boom").status_code == 500

    def test_carries_upstream_status(self) -> None:
        err = UpstreamFailure("Failed to fetch: Not Found", status_code=404)
        assert err.status_code == 404
        assert str(err) == "Failed to fetch: Not Found"
