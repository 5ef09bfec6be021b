"""Line-oriented catalog parsers.

Every non-blank line is one record with ``|``-separated, trimmed fields:

    Movies:          Title | URL | Image? | Category?
    Series:          SeriesTitle | EpisodeLabel | URL | SeriesImage? | Genre?
    Foreign series:  SeriesTitle | EpisodeLabel | URL | Image? | SubsSpec?

Malformed lines (too few fields, empty title/url) are skipped; a partial
parse is the normal outcome, never an error.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Iterator

import structlog

from cinedock.domain.entities.catalog import (
    Episode,
    Movie,
    Provenance,
    Series,
    Subtitle,
)
from cinedock.infrastructure.catalog.ids import (
    episode_id,
    foreign_episode_id,
    foreign_series_id,
    movie_id,
    series_id,
)

log = structlog.get_logger(__name__)

DEFAULT_MOVIE_CATEGORY = "أفلام"
DEFAULT_EPISODE_TEMPLATE = "الحلقة {number:02d}"

# First run of 1-3 digits anywhere in the label ("EP Episode 01", "Episode 2").
_EPISODE_NUMBER_RE = re.compile(r"\d{1,3}")

_TATWEEL = "ـ"
_ALEF_WASLA = str.maketrans({"ٱ": "ا"})
_ARABIC_BLOCKS = (
    ("\u0600", "\u06ff"),
    ("\u0750", "\u077f"),
    ("\u08a0", "\u08ff"),
    ("\ufb50", "\ufdff"),
    ("\ufe70", "\ufeff"),
)


def _script_weight(ch: str) -> tuple[int, str]:
    if not ch.isalpha():
        return 0, ch
    if any(lo <= ch <= hi for lo, hi in _ARABIC_BLOCKS):
        return 1, ch
    return 2, ch


def collation_key(text: str) -> tuple[list[tuple[int, str]], str]:
    """Sort key approximating Arabic locale collation.

    Characters rank as non-letters, then Arabic letters, then letters of
    any other script, so Arabic titles precede Latin ones.  Within Arabic
    the code point order is already alphabetical once diacritics (harakat,
    hamza marks on alef decompose under NFKD) and tatweel are dropped;
    Latin is casefolded.  The original text breaks ties so the order is
    total.

    >>> sorted(["Zeta", "باب", "alpha"], key=collation_key)
    ['باب', 'alpha', 'Zeta']
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(
        ch for ch in decomposed if not unicodedata.combining(ch) and ch != _TATWEEL
    )
    folded = base.translate(_ALEF_WASLA).casefold()
    return [_script_weight(ch) for ch in folded], text


def extract_episode_number(label: str) -> int | None:
    m = _EPISODE_NUMBER_RE.search(label or "")
    return int(m.group(0)) if m else None


def episode_sort_key(
    episode: Episode,
) -> tuple[int, int, tuple[list[tuple[int, str]], str]]:
    """Numeric episodes ascending, then label-only episodes by title."""
    if episode.number is None:
        return 1, 0, collation_key(episode.title)
    return 0, episode.number, ([], "")


def sort_episodes(episodes: Iterable[Episode]) -> tuple[Episode, ...]:
    return tuple(sorted(episodes, key=episode_sort_key))


def sort_series(series: Iterable[Series]) -> list[Series]:
    return sorted(series, key=lambda s: collation_key(s.title))


def episode_display_title(label: str, number: int | None, template: str) -> str:
    if number is None:
        return label
    return template.format(number=number)


def _lines(text: str) -> Iterator[str]:
    for raw in (text or "").split("\n"):
        line = raw.strip()
        if line:
            yield line


def _non_empty_fields(line: str) -> list[str]:
    # Empty fields are dropped before positional assignment.
    return [p for p in (part.strip() for part in line.split("|")) if p]


def _field(parts: list[str], index: int) -> str:
    return parts[index] if index < len(parts) else ""


def parse_subs(spec: str) -> tuple[Subtitle, ...]:
    """Parse a comma-separated subtitle spec.

    Items are either bare URLs (``https://.../a.vtt``) or ``lang:url`` pairs
    (``en:https://.../a.vtt``).  Bare URLs get synthesized ``SUB n`` labels.
    """
    items = [p.strip() for p in (spec or "").split(",")]
    subs: list[Subtitle] = []
    for idx, item in enumerate((p for p in items if p), start=1):
        if not item.startswith("http") and ":" in item:
            lang, _, url = item.partition(":")
            lang = lang.strip()
            subs.append(
                Subtitle(
                    lang=(lang or f"s{idx}").lower(),
                    label=(lang or f"SUB{idx}").upper(),
                    url=url.strip(),
                )
            )
        else:
            subs.append(Subtitle(lang=f"s{idx}", label=f"SUB {idx}", url=item))
    return tuple(subs)


def parse_movies(
    text: str,
    *,
    default_category: str = DEFAULT_MOVIE_CATEGORY,
) -> list[Movie]:
    """Parse movie lines, preserving file order."""
    movies: list[Movie] = []
    skipped = 0
    for line in _lines(text):
        parts = _non_empty_fields(line)
        if len(parts) < 2:
            skipped += 1
            continue
        title, url = parts[0], parts[1]
        movies.append(
            Movie(
                id=movie_id(title, url),
                title=title,
                url=url,
                image=_field(parts, 2),
                category=_field(parts, 3) or default_category,
                provenance=Provenance.FILE,
            )
        )
    if skipped:
        log.debug("catalog_lines_skipped", kind="movies", skipped=skipped)
    return movies


class _SeriesBuilder:
    """Accumulates episodes per series title; first non-empty image/genre wins."""

    def __init__(self, id: str, title: str) -> None:
        self.id = id
        self.title = title
        self.image = ""
        self.genre = ""
        self.episodes: list[Episode] = []

    def absorb(self, image: str, genre: str) -> None:
        if not self.image and image:
            self.image = image
        if not self.genre and genre:
            self.genre = genre

    def build(self) -> Series:
        return Series(
            id=self.id,
            title=self.title,
            image=self.image,
            genre=self.genre,
            episodes=sort_episodes(self.episodes),
            provenance=Provenance.FILE,
        )


def parse_series(
    text: str,
    *,
    episode_title_template: str = DEFAULT_EPISODE_TEMPLATE,
) -> list[Series]:
    """Parse series lines, grouped by series title and sorted by collation."""
    builders: dict[str, _SeriesBuilder] = {}
    skipped = 0
    for line in _lines(text):
        parts = _non_empty_fields(line)
        if len(parts) < 3:
            skipped += 1
            continue
        title, label, url = parts[0], parts[1], parts[2]

        builder = builders.get(title)
        if builder is None:
            builder = builders[title] = _SeriesBuilder(series_id(title), title)
        builder.absorb(_field(parts, 3), _field(parts, 4))

        number = extract_episode_number(label)
        builder.episodes.append(
            Episode(
                id=episode_id(title, label, url),
                series_id=builder.id,
                series_title=title,
                label=label,
                title=episode_display_title(label, number, episode_title_template),
                url=url,
                number=number,
                provenance=Provenance.FILE,
            )
        )
    if skipped:
        log.debug("catalog_lines_skipped", kind="series", skipped=skipped)
    return sort_series(b.build() for b in builders.values())


def parse_foreign(text: str) -> list[Series]:
    """Parse foreign-series lines (positional fields, optional subtitles)."""
    builders: dict[str, _SeriesBuilder] = {}
    skipped = 0
    for line in _lines(text):
        parts = [p.strip() for p in line.split("|")]
        title, label, url = _field(parts, 0), _field(parts, 1), _field(parts, 2)
        if not (title and label and url):
            skipped += 1
            continue

        image = _field(parts, 3)
        builder = builders.get(title)
        if builder is None:
            builder = builders[title] = _SeriesBuilder(foreign_series_id(title), title)
        builder.absorb(image, "")

        builder.episodes.append(
            Episode(
                id=foreign_episode_id(title, label, url),
                series_id=builder.id,
                series_title=title,
                label=label,
                title=label,
                url=url,
                number=extract_episode_number(label),
                image=image,
                subs=parse_subs(_field(parts, 4)),
                provenance=Provenance.FILE,
            )
        )
    if skipped:
        log.debug("catalog_lines_skipped", kind="foreign", skipped=skipped)
    return sort_series(b.build() for b in builders.values())
