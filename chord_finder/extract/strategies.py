from __future__ import annotations

import logging
import re
from functools import cached_property
from typing import Protocol, Sequence, runtime_checkable

from bs4 import BeautifulSoup

from chord_finder.errors import UnrecognizedStructure

from .embedded import STORE_MARKER, dig, find_embedded_state

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 50

_CH_RE = re.compile(r"\[ch\](.*?)\[/ch\]", re.DOTALL)
_TAB_RE = re.compile(r"\[/?tab\]")


def strip_tab_markup(text: str) -> str:
    """[ch]Am[/ch] -> Am, drop [tab]/[/tab], CRLF/CR -> LF."""
    text = _CH_RE.sub(r"\1", text)
    text = _TAB_RE.sub("", text)
    return text.replace("\r\n", "\n").replace("\r", "\n")


class PageDocument:
    """Raw HTML of one fetched page, parsed lazily."""

    def __init__(self, url: str, html: str):
        self.url = url
        self.html = html

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")


@runtime_checkable
class ContentStrategy(Protocol):
    name: str

    def try_extract(self, document: PageDocument) -> str | None: ...


class EmbeddedStateStrategy:
    name = "embedded_state"

    def __init__(
        self,
        *,
        marker: str = STORE_MARKER,
        content_path: Sequence[str] = ("store", "page", "data", "tab_view", "wiki_tab", "content"),
    ):
        self.marker = marker
        self.content_path = tuple(content_path)

    def try_extract(self, document: PageDocument) -> str | None:
        try:
            state = find_embedded_state(document.html, marker=self.marker)
        except UnrecognizedStructure as e:
            logger.debug("%s: %s", document.url, e)
            return None
        if state is None:
            return None
        content = dig(state, *self.content_path)
        # some pages serialize the store without the outer "store" key
        if content is None and self.content_path[:1] == ("store",):
            content = dig(state, *self.content_path[1:])
        if not isinstance(content, str) or not content.strip():
            return None
        return strip_tab_markup(content).strip("\n")


class SelectorStrategy:
    """
    First element matching any selector, in order, with enough text.

    Returns the element's inner markup, entities still escaped; the
    normalizer strips the tags and decodes it once.
    """

    def __init__(self, selectors: Sequence[str], *, min_chars: int = MIN_CONTENT_CHARS, name: str = "selectors"):
        self.selectors = tuple(selectors)
        self.min_chars = min_chars
        self.name = name

    def try_extract(self, document: PageDocument) -> str | None:
        for selector in self.selectors:
            for el in document.soup.select(selector):
                text = el.get_text().strip()
                # shorter blocks are decorative <pre>s and nav widgets
                if len(text) > self.min_chars:
                    logger.debug("%s: matched %r (%d chars)", document.url, selector, len(text))
                    return el.decode_contents().strip()
        return None


UG_SELECTORS = (
    'pre[class*="js-tab-content"]',
    '[data-name="tab-content"] pre',
    ".js-tab-content pre",
    'code[class*="code"]',
)
AMDM_SELECTORS = (
    ".song_text",
    ".chord_text",
    ".song-text",
    ".b-podbor__text",
)
GENERIC_SELECTORS = ("pre",)


def default_strategies(
    site_selectors: Sequence[str] = UG_SELECTORS + AMDM_SELECTORS,
    *,
    min_chars: int = MIN_CONTENT_CHARS,
) -> list[ContentStrategy]:
    return [
        EmbeddedStateStrategy(),
        SelectorStrategy(tuple(site_selectors) + GENERIC_SELECTORS, min_chars=min_chars),
    ]
