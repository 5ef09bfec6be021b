"""Content-addressable catalog identifiers.

IDs are ``<prefix>_<hex>`` where ``<hex>`` is a 32-bit polynomial rolling
hash (multiplier 31, wrapping at 2**32) of the lower-cased, ``|``-joined
defining fields.  The hash walks UTF-16 code units so IDs stay identical
to the ones already handed out to clients for the existing catalog data.

Collisions are possible (32 bits) and are not detected.

>>> generate_id(["a"], "m")
'm_61'
"""

from __future__ import annotations

from collections.abc import Sequence

_SEPARATOR = "|"
_MULTIPLIER = 31
_MASK = 0xFFFFFFFF

MOVIE_PREFIX = "m"
SERIES_PREFIX = "s"
EPISODE_PREFIX = "e"
FOREIGN_SERIES_PREFIX = "f"
FOREIGN_EPISODE_PREFIX = "fe"


def _utf16_units(text: str) -> list[int]:
    raw = text.encode("utf-16-le", errors="surrogatepass")
    return [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)]


def rolling_hash(text: str) -> int:
    h = 0
    for unit in _utf16_units(text.lower()):
        h = (h * _MULTIPLIER + unit) & _MASK
    return h


def generate_id(parts: Sequence[str], prefix: str) -> str:
    """Derive a stable ID from *parts*; always succeeds for string input."""
    return f"{prefix}_{rolling_hash(_SEPARATOR.join(parts)):x}"


def movie_id(title: str, url: str) -> str:
    return generate_id([title, url], MOVIE_PREFIX)


def series_id(title: str) -> str:
    return generate_id([title], SERIES_PREFIX)


def episode_id(series_title: str, label: str, url: str) -> str:
    return generate_id([series_title, label, url], EPISODE_PREFIX)


def foreign_series_id(title: str) -> str:
    return generate_id([title], FOREIGN_SERIES_PREFIX)


def foreign_episode_id(series_title: str, label: str, url: str) -> str:
    return generate_id([series_title, label, url], FOREIGN_EPISODE_PREFIX)
