from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urljoin, urlsplit

import regex
from bs4.element import Tag

from chord_finder.errors import SourceUnavailable
from chord_finder.extract.extractor import ContentExtractor, is_listing_url

from .types import ExtractionOutcome, ResultStub, Script

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], str]

MAX_RESULTS = 10
OFFICIAL_STAR_FILL = "#00E148"

_SLUG_SPLIT_RE = regex.compile(r"[-_]+")
_TRAILING_ID_RE = regex.compile(
    r"(?:[-_](?:chords|tabs?|ukulele|bass|drums|official|guitar[-_]pro|pro|power))*[-_]\d+$"
)


class SiteAdapter:
    """
    One external chord archive.

    Subclasses provide `search_url` and `parse_results`; the fetch, the
    result cap and the error boundary live here so no adapter can leak an
    exception to the router.
    """

    name: str
    display_name: str
    script: Script
    domains: tuple[str, ...] = ()

    def __init__(self, *, fetch: Fetcher, extractor: ContentExtractor, max_results: int = MAX_RESULTS):
        self.fetch = fetch
        self.extractor = extractor
        self.max_results = max_results

    def search_url(self, query: str) -> str:
        raise NotImplementedError

    def parse_results(self, html: str) -> list[ResultStub]:
        raise NotImplementedError

    def search(self, query: str) -> list[ResultStub]:
        url = self.search_url(query)
        try:
            html = self.fetch(url)
        except SourceUnavailable as e:
            logger.warning("%s search failed: %s", self.name, e)
            return []
        try:
            results = self.parse_results(html)
        except Exception as e:
            # page data is untrusted, any failure here means "no results"
            logger.warning("%s: could not parse search page: %s", self.name, e, exc_info=True)
            return []
        logger.info("%s: %d results for %r", self.name, len(results), query)
        return results[: self.max_results]

    def extract(self, url: str) -> ExtractionOutcome:
        return self.extractor.extract(url)

    def handles(self, url: str) -> bool:
        host = (urlsplit(url).hostname or "").lower()
        return any(host == d or host.endswith("." + d) for d in self.domains)

    def is_listing_url(self, url: str) -> bool:
        return is_listing_url(url)

    def is_direct_url(self, url: str) -> bool:
        """Absolute http(s) page of this site that is not a listing page."""
        if not url:
            return False
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            return False
        return not self.is_listing_url(url)


def absolute_url(href: str | None, base: str) -> str | None:
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None
    url = urljoin(base, href)
    if urlsplit(url).scheme not in ("http", "https"):
        return None
    return url


def _slug_to_words(slug: str) -> str | None:
    words = [w for w in _SLUG_SPLIT_RE.split(slug) if w]
    if not words:
        return None
    return " ".join(w[:1].upper() + w[1:] for w in words)


def artist_from_url(url: str, marker: str) -> str | None:
    """
    /tab/the-beatles/let-it-be-chords-1 -> "The Beatles" for marker "tab".
    """
    parts = [p for p in urlsplit(url).path.split("/") if p]
    if len(parts) < 2 or parts[0] != marker:
        return None
    return _slug_to_words(parts[1])


def title_from_url(url: str, marker: str) -> str | None:
    """Last path segment without the type/id suffix: wonderwall-chords-27596 -> "Wonderwall"."""
    parts = [p for p in urlsplit(url).path.split("/") if p]
    if len(parts) < 3 or parts[0] != marker:
        return None
    slug = _TRAILING_ID_RE.sub("", parts[-1])
    if not slug or slug.isdigit():
        return None
    return _slug_to_words(slug)


def quality_marker(block: Tag) -> str:
    """Visual official/quality markers shared by the DOM result layouts."""
    tip = block.select_one("[data-tip]")
    if tip is not None and "Official version" in (tip.get("data-tip") or ""):
        return "Official"
    if block.select_one(f'svg path[fill="{OFFICIAL_STAR_FILL}"]') is not None:
        return "Official"
    return ""


def sort_by_tier(results: list[ResultStub]) -> list[ResultStub]:
    # sorted() is stable: equal tiers keep their source order
    return sorted(results, key=lambda r: r.tier, reverse=True)
