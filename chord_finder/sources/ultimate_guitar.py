from __future__ import annotations

import logging
import math
from typing import Any
from urllib.parse import quote

from bs4 import BeautifulSoup
from bs4.element import Tag

from chord_finder.errors import UnrecognizedStructure
from chord_finder.extract.embedded import dig, find_embedded_state

from .base import SiteAdapter, absolute_url, artist_from_url, quality_marker, sort_by_tier, title_from_url
from .types import ResultStub, Script

logger = logging.getLogger(__name__)

BASE_URL = "https://www.ultimate-guitar.com"


def ug_search_url(query: str) -> str:
    return f"{BASE_URL}/search.php?search_type=title&value={quote(query)}"


def _as_float(value: Any) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    # json.loads accepts Infinity and NaN, and "inf" parses as a float too
    return f if math.isfinite(f) else 0.0


def _as_int(value: Any) -> int:
    return int(_as_float(value))


class UltimateGuitarSource(SiteAdapter):
    """
    Latin-script tab archive.

    Search pages embed the whole result set as JSON in the `js-store`
    element; when that blob is missing the result rows are scraped instead.
    """

    name = "ultimate_guitar"
    display_name = "Ultimate Guitar"
    script = Script.OTHER
    domains = ("ultimate-guitar.com",)

    content_types: tuple[str, ...] = ("Chords", "Official")

    def search_url(self, query: str) -> str:
        return ug_search_url(query)

    def parse_results(self, html: str) -> list[ResultStub]:
        try:
            state = find_embedded_state(html)
        except UnrecognizedStructure as e:
            logger.debug("unreadable js-store, scraping rows: %s", e)
            state = None
        if state is not None:
            items = dig(state, "store", "page", "data", "results")
            if items is None:
                items = dig(state, "page", "data", "results")
            if isinstance(items, list):
                return self._from_state(items)
            logger.debug("js-store present but has no results list, scraping rows")
        return self._from_rows(html)

    def _from_state(self, items: list[Any]) -> list[ResultStub]:
        rated: list[tuple[float, ResultStub]] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            type_ = str(item.get("type") or "")
            if type_ not in self.content_types:
                continue
            url = absolute_url(item.get("tab_url"), BASE_URL)
            if url is None or not self.is_direct_url(url):
                continue

            rating = _as_float(item.get("rating"))
            votes = _as_int(item.get("votes"))
            official = type_ == "Official" or str(item.get("tab_access_type") or "").lower() == "official"
            if official:
                quality = "Official"
            elif rating > 0:
                quality = f"Rating {rating:.1f} ({votes} votes)"
            else:
                quality = ""

            title = str(item.get("song_name") or "") or title_from_url(url, "tab") or "Unknown Song"
            version = _as_int(item.get("version"))
            if version > 1:
                title = f"{title} (ver {version})"
            artist = str(item.get("artist_name") or "") or artist_from_url(url, "tab") or "Unknown Artist"

            rated.append(
                (
                    rating,
                    ResultStub(
                        title=title,
                        artist=artist,
                        source_url=url,
                        type=type_,
                        quality=quality,
                        source=self.display_name,
                    ),
                )
            )

        rated.sort(key=lambda x: x[0], reverse=True)
        return sort_by_tier([stub for _, stub in rated])

    def _from_rows(self, html: str) -> list[ResultStub]:
        soup = BeautifulSoup(html, "html.parser")
        # first row is the column header
        rows = soup.select("div.dyhP1")[1:]
        out: list[ResultStub] = []
        for row in rows:
            if len(out) >= self.max_results:
                break
            stub = self._row_to_stub(row)
            if stub is not None:
                out.append(stub)
        return sort_by_tier(out)

    def _row_to_stub(self, row: Tag) -> ResultStub | None:
        song_cell = row.select_one(".SGCxQ, .qNp1Q:nth-child(2)")
        if song_cell is None:
            return None
        link = song_cell.select_one("a[tabcount]") or song_cell.select_one("a")
        if link is None:
            return None

        href = link.get("href")
        if not href or href == "#":
            href = link.get("data-url") or link.get("data-href")
        if not href:
            tab_link = row.select_one('a[href*="/tab/"]')
            href = tab_link.get("href") if tab_link is not None else None
        url = absolute_url(href, BASE_URL)
        if url is None or "submit" in url or not self.is_direct_url(url):
            return None

        artist_cell = row.select_one(".SUEyv, .qNp1Q:first-child")
        artist_link = artist_cell.select_one('a[href*="/artist/"]') if artist_cell is not None else None
        artist = artist_link.get_text(" ", strip=True) if artist_link is not None else ""
        artist = artist or artist_from_url(url, "tab") or "Unknown Artist"

        title = link.get_text(" ", strip=True) or title_from_url(url, "tab") or "Unknown Song"

        quality = quality_marker(link)
        if not quality:
            span = row.select_one(".D8BqY")
            quality = span.get_text(" ", strip=True) if span is not None else ""

        return ResultStub(
            title=title,
            artist=artist,
            source_url=url,
            type=_row_type(row.get_text(" ", strip=True)),
            quality=quality,
            source=self.display_name,
        )


def _row_type(text: str) -> str:
    if "Official" in text:
        return "Official"
    if "Guitar Pro" in text:
        return "Guitar Pro"
    if "Tab" in text:
        return "Tab"
    if "Ukulele" in text:
        return "Ukulele"
    if "Bass" in text:
        return "Bass"
    return "Chords"
