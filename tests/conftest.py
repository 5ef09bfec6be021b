"""Shared test fixtures for the cinedock test suite."""

from __future__ import annotations

import time
from pathlib import Path
from unittest.mock import AsyncMock

import jwt
import pytest

from cinedock.domain.ports.catalog_files import CatalogFileKind
from cinedock.infrastructure.config.schema import (
    AppConfig,
    AuthConfig,
    CatalogConfig,
)

TEST_JWT_SECRET = "test-secret-with-at-least-32-bytes!!"

# ---------------------------------------------------------------------------
# Sample catalog text
# ---------------------------------------------------------------------------

MOVIES_TXT = """\
Inception | https://cdn.example.com/inception/master.m3u8 | https://img.example.com/inception.jpg | Sci-Fi
The Matrix | https://cdn.example.com/matrix.mp4
broken line without url
"""

SERIES_TXT = """\
Dark | Episode 2 | https://cdn.example.com/dark/2.m3u8 | https://img.example.com/dark.jpg | Drama
Dark | Episode 10 | https://cdn.example.com/dark/10.m3u8
Dark | Episode 1 | https://cdn.example.com/dark/1.m3u8
Dark | Special | https://cdn.example.com/dark/special.m3u8
"""

FOREIGN_TXT = """\
Lupin | EP 1 | https://iframe.mediadelivery.net/embed/123/abc | https://img.example.com/lupin.jpg | en:https://subs.example.com/1.vtt
Lupin | EP 2 | https://cdn.example.com/lupin/2.m3u8 | | https://subs.example.com/2.vtt
"""


class FakeCatalogFiles:
    """In-memory CatalogFilesPort."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self.texts = dict(texts or {})
        self.reads: list[str] = []

    async def read(self, kind: CatalogFileKind) -> str:
        self.reads.append(kind)
        return self.texts.get(kind, "")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog_config(tmp_path: Path) -> CatalogConfig:
    return CatalogConfig(data_dir=tmp_path)


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    """Test config: session required, known JWT secret, empty data dir."""
    return AppConfig(
        environment="test",
        catalog=CatalogConfig(data_dir=tmp_path),
        auth=AuthConfig(require_session=True, jwt_secret=TEST_JWT_SECRET),
    )


@pytest.fixture()
def fake_files() -> FakeCatalogFiles:
    return FakeCatalogFiles(
        {"movies": MOVIES_TXT, "series": SERIES_TXT, "foreign": FOREIGN_TXT}
    )


@pytest.fixture()
def empty_kv() -> AsyncMock:
    """KeyValueStorePort mock returning nothing for every read."""
    kv = AsyncMock()
    kv.smembers = AsyncMock(return_value=[])
    kv.hgetall = AsyncMock(return_value={})
    kv.get = AsyncMock(return_value=None)
    return kv


def kv_with(data: dict[str, object]) -> AsyncMock:
    """KeyValueStorePort mock serving sets (lists) and hashes (dicts) from *data*."""
    kv = AsyncMock()

    async def smembers(key: str) -> list[str]:
        value = data.get(key)
        return list(value) if isinstance(value, list) else []

    async def hgetall(key: str) -> dict[str, str]:
        value = data.get(key)
        return dict(value) if isinstance(value, dict) else {}

    kv.smembers = AsyncMock(side_effect=smembers)
    kv.hgetall = AsyncMock(side_effect=hgetall)
    return kv


@pytest.fixture()
def kv_factory():
    """Build a store mock from a ``{key: list | dict}`` mapping."""
    return kv_with


@pytest.fixture()
def files_factory():
    """Build a FakeCatalogFiles from ``{kind: text}``."""
    return FakeCatalogFiles


@pytest.fixture()
def session_token() -> str:
    """Valid session JWT for ``app_config``."""
    return jwt.encode(
        {"sub": "viewer-1", "exp": int(time.time()) + 3600},
        TEST_JWT_SECRET,
        algorithm="HS256",
    )


@pytest.fixture()
def catalog_dir(tmp_path: Path) -> Path:
    """Write the sample catalog files under their default names into ``tmp_path``."""
    (tmp_path / "catalog.txt").write_text(MOVIES_TXT, encoding="utf-8")
    (tmp_path / "series.txt").write_text(SERIES_TXT, encoding="utf-8")
    (tmp_path / "foreign-series.txt").write_text(FOREIGN_TXT, encoding="utf-8")
    return tmp_path
