"""End-to-end tests: real app, real lifespan, flat files on disk.

The mutable store is left unconfigured so every store read is empty and
the catalog comes from the files written into ``tmp_path``.  Upstream
media hosts are mocked with respx at the httpcore layer; the TestClient
transport is not affected by it.
"""

from __future__ import annotations

import time
from pathlib import Path
from urllib.parse import quote

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from cinedock.infrastructure.catalog.ids import (
    foreign_episode_id,
    movie_id,
    series_id,
)
from cinedock.infrastructure.config.schema import AppConfig, BunnyConfig
from cinedock.interfaces.app import create_app

pytestmark = pytest.mark.e2e

_MANIFEST_URL = "https://cdn.example.com/inception/master.m3u8"
_MANIFEST = "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=800000\nlow/index.m3u8\n"


@pytest.fixture()
def client(app_config: AppConfig, catalog_dir: Path, session_token: str):
    with TestClient(create_app(app_config)) as c:
        c.cookies.set("session", session_token)
        yield c


def test_healthz(client: TestClient) -> None:
    resp = client.get("/api/v1/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_catalog_requires_session(app_config: AppConfig) -> None:
    with TestClient(create_app(app_config)) as c:
        resp = c.get("/api/v1/catalog")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not logged in"}


def test_catalog_from_files(client: TestClient) -> None:
    resp = client.get("/api/v1/catalog")

    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    body = resp.json()
    assert [m["title"] for m in body["movies"]] == ["Inception", "The Matrix"]
    (dark,) = body["series"]
    assert dark["id"] == series_id("Dark")
    assert dark["count"] == 4
    assert body["foreignSeries"][0]["title"] == "Lupin"


def test_stream_movie(client: TestClient) -> None:
    resp = client.get(
        "/api/v1/stream", params={"id": movie_id("Inception", _MANIFEST_URL)}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["url"] == _MANIFEST_URL
    assert body["kind"] == "hls"
    assert body["category"] == "Sci-Fi"


def test_stream_foreign_episode_with_subs(client: TestClient) -> None:
    fe_id = foreign_episode_id(
        "Lupin", "EP 1", "https://iframe.mediadelivery.net/embed/123/abc"
    )
    resp = client.get("/api/v1/stream", params={"id": fe_id})

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Lupin - EP 1"
    assert body["kind"] == "bunny_embed"
    assert body["category"] == "مسلسل أجنبي"
    assert body["subs"] == [
        {"lang": "en", "label": "EN", "url": "https://subs.example.com/1.vtt"}
    ]


def test_stream_unknown_id(client: TestClient) -> None:
    resp = client.get("/api/v1/stream", params={"id": "m_deadbeef"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found"}


def test_stream_bad_prefix(client: TestClient) -> None:
    resp = client.get("/api/v1/stream", params={"id": "x_1"})
    assert resp.status_code == 400


def test_hls_proxy_rewrites_manifest(client: TestClient) -> None:
    with respx.mock(assert_all_called=False) as mock:
        mock.get(_MANIFEST_URL).mock(
            return_value=httpx.Response(
                200,
                text=_MANIFEST,
                headers={"content-type": "application/vnd.apple.mpegurl"},
            )
        )
        resp = client.get("/api/v1/hls-proxy", params={"url": _MANIFEST_URL})

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["cache-control"] == "public, max-age=300"
    expected = "/api/v1/hls-proxy?url=" + quote(
        "https://cdn.example.com/inception/low/index.m3u8", safe="!*'()"
    )
    assert resp.text.splitlines()[-1] == expected
    assert resp.text.startswith("#EXTM3U\n")


def test_hls_proxy_relays_segment_bytes(client: TestClient) -> None:
    seg_url = "https://cdn.example.com/inception/low/seg0.ts"
    with respx.mock(assert_all_called=False) as mock:
        mock.get(seg_url).mock(
            return_value=httpx.Response(
                200, content=b"\x00\x01ts", headers={"content-type": "video/mp2t"}
            )
        )
        resp = client.get("/api/v1/hls-proxy", params={"url": seg_url})

    assert resp.status_code == 200
    assert resp.content == b"\x00\x01ts"
    assert resp.headers["x-proxy-binary"] == "1"


def test_hls_proxy_upstream_status_propagates(client: TestClient) -> None:
    with respx.mock(assert_all_called=False) as mock:
        mock.get(_MANIFEST_URL).mock(return_value=httpx.Response(403))
        resp = client.get("/api/v1/hls-proxy", params={"url": _MANIFEST_URL})

    assert resp.status_code == 403
    assert resp.text == "Failed to fetch: Forbidden"


def test_subtitle_relay(client: TestClient) -> None:
    vtt_url = "https://subs.example.com/1.vtt"
    with respx.mock(assert_all_called=False) as mock:
        mock.get(vtt_url).mock(
            return_value=httpx.Response(200, text="WEBVTT\n\n00:00.000 --> 00:01.000\nHi\n")
        )
        resp = client.get("/api/v1/subtitle", params={"url": vtt_url})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/vtt; charset=utf-8"
    assert resp.text.startswith("WEBVTT")


def test_bunny_token_unconfigured(client: TestClient) -> None:
    resp = client.post("/api/v1/bunny-token", json={"videoId": "abc"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Server configuration error"}


def test_bunny_token_signed(
    app_config: AppConfig, catalog_dir: Path, session_token: str
) -> None:
    config = app_config.model_copy(
        update={"bunny": BunnyConfig(library_id="12345", security_key="sec-key")}
    )
    with TestClient(create_app(config)) as c:
        c.cookies.set("session", session_token)
        resp = c.post("/api/v1/bunny-token", json={"videoId": "abc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["libraryId"] == "12345"
    assert len(body["token"]) == 64
    assert body["expires"] > time.time()
