"""Domain entities for the media catalog and stream resolution.

Pure value objects — no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Provenance(str, Enum):
    """Which backing source produced a catalog entry.

    Only ``STORE`` entries are editable; ``FILE`` entries are read-only.
    """

    STORE = "store"
    FILE = "file"


class StreamKind(str, Enum):
    """Playback kind reported to the player."""

    HLS = "hls"
    MP4 = "mp4"
    BUNNY_EMBED = "bunny_embed"
    VIDEAS_EMBED = "videas_embed"


@dataclass(frozen=True)
class Subtitle:
    """A subtitle track attached to an episode."""

    lang: str  # "en", "fr", "s1"
    label: str  # "EN", "SUB 1"
    url: str


@dataclass(frozen=True)
class Movie:
    id: str  # "m_<hex>"
    title: str
    url: str
    image: str = ""
    category: str = ""
    provenance: Provenance = Provenance.FILE


@dataclass(frozen=True)
class Episode:
    """A single episode of a series or foreign series.

    ``label`` is the raw episode label from the source, ``title`` the
    display title derived from it.
    """

    id: str  # "e_<hex>" or "fe_<hex>"
    series_id: str
    series_title: str
    label: str
    title: str
    url: str
    number: int | None = None
    image: str = ""
    subs: tuple[Subtitle, ...] = ()
    provenance: Provenance = Provenance.FILE


@dataclass(frozen=True)
class Series:
    id: str  # "s_<hex>" or "f_<hex>"
    title: str
    image: str = ""
    genre: str = ""
    episodes: tuple[Episode, ...] = ()
    provenance: Provenance = Provenance.FILE

    @property
    def count(self) -> int:
        return len(self.episodes)


@dataclass(frozen=True)
class Catalog:
    """Merged catalog; store-provenance entries come first in every list."""

    movies: list[Movie] = field(default_factory=list)
    series: list[Series] = field(default_factory=list)
    foreign_series: list[Series] = field(default_factory=list)


@dataclass(frozen=True)
class StreamDescriptor:
    """Resolver output: everything the player needs to start playback."""

    title: str
    url: str
    kind: StreamKind
    image: str = ""
    category: str = ""
    subs: tuple[Subtitle, ...] = ()


@dataclass(frozen=True)
class ProxiedResource:
    """Result of relaying one HLS resource through the proxy.

    For manifests ``body`` is the rewritten playlist text. For binary
    segments ``body`` is the upstream bytes, untouched, and ``is_binary``
    is set.
    """

    content_type: str
    body: str | bytes
    is_binary: bool = False

    @property
    def payload(self) -> bytes:
        """Raw bytes to put on the wire."""
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")


@dataclass(frozen=True)
class BunnyEmbedToken:
    """Signed parameters that unlock a token-protected Bunny Stream embed."""

    token: str  # sha256 hex
    expires: int  # unix seconds
    library_id: str
