from __future__ import annotations

from urllib.parse import quote

from bs4 import BeautifulSoup

from .base import SiteAdapter, absolute_url, artist_from_url, quality_marker, sort_by_tier, title_from_url
from .types import ResultStub, Script

BASE_URL = "https://amdm.ru"


class AmdmSource(SiteAdapter):
    """Cyrillic-script chord archive (amdm.ru). Plain HTML results, no embedded state."""

    name = "amdm"
    display_name = "AMDM.ru"
    script = Script.CYRILLIC
    domains = ("amdm.ru",)

    def search_url(self, query: str) -> str:
        return f"{BASE_URL}/search/?q={quote(query)}"

    def parse_results(self, html: str) -> list[ResultStub]:
        soup = BeautifulSoup(html, "html.parser")
        out: list[ResultStub] = []
        for block in soup.select(".search_result"):
            if len(out) >= self.max_results:
                break
            link = block.find("a")
            url = absolute_url(link.get("href"), BASE_URL) if link is not None else None
            if url is None or not self.is_direct_url(url):
                continue

            # link text is usually "Artist - Song"
            text = link.get_text(" ", strip=True)
            artist, sep, song = text.partition(" - ")
            if sep:
                artist, title = artist.strip(), song.strip()
            else:
                artist, title = "", text
            artist = artist or artist_from_url(url, "akkordi") or "Unknown Artist"
            title = title or title_from_url(url, "akkordi") or "Unknown Song"

            out.append(
                ResultStub(
                    title=title,
                    artist=artist,
                    source_url=url,
                    type="Chords",
                    quality=quality_marker(block),
                    source=self.display_name,
                )
            )
        return sort_by_tier(out)
