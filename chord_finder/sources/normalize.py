from __future__ import annotations

import html
from typing import Iterable, Mapping
from urllib.parse import quote

import regex

from chord_finder.extract.strategies import strip_tab_markup

from .types import NormalizedResult, ResultStub
from .ultimate_guitar import ug_search_url

_BR_RE = regex.compile(r"<br\s*/?>", regex.IGNORECASE)
# Markup tags only, lower case as pages emit them. Angle-bracket chord
# notation such as <Am> or <B> is part of the sheet and must survive.
_TAG_RE = regex.compile(
    r"</?(?:a|b|i|u|em|strong|small|sup|sub|span|font|div|p|pre|code|section|article|ul|ol|li|h[1-6])(?=[\s/>])[^<>]*>"
)


def clean_text(text: str) -> str:
    """
    Strip leftover markup, then decode HTML entities exactly once.

    Decoding happens after tag stripping, so `&lt;Am&gt;` in the page
    comes out as the literal chord `<Am>`.
    """
    text = strip_tab_markup(text)
    text = _BR_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    return "\n".join(ln.rstrip() for ln in text.split("\n")).strip("\n")


def fallback_stubs(query: str) -> list[ResultStub]:
    """Links to the two big search portals, for the user to open by hand."""
    return [
        ResultStub(
            title=f'Search "{query}" on Ultimate Guitar',
            artist="External Link",
            source_url=ug_search_url(query),
            type="Search",
            quality="",
            source="Ultimate Guitar",
            extractable=False,
        ),
        ResultStub(
            title=f'Search "{query}" on Chordify',
            artist="External Link",
            source_url=f"https://chordify.net/search/{quote(query)}",
            type="Search",
            quality="",
            source="Chordify",
            extractable=False,
        ),
    ]


def normalize(
    stubs: Iterable[ResultStub | NormalizedResult],
    texts_by_url: Mapping[str, str] | None = None,
    *,
    query: str,
) -> list[NormalizedResult]:
    """
    Dedupe by URL (first wins), clean texts, rank 1..n in input order.

    Input order is adapter priority then per-adapter quality and is kept
    as is. Already normalized results are accepted and their text is kept
    as it is, so the function is idempotent.
    """
    texts = texts_by_url or {}
    seen: set[str] = set()
    kept: list[tuple[ResultStub, str | None]] = []

    for item in stubs:
        if isinstance(item, NormalizedResult):
            stub, text = item.stub, item.text
        else:
            stub, text = item, None
        if stub.source_url in seen:
            continue
        seen.add(stub.source_url)
        raw = texts.get(stub.source_url)
        if raw is not None:
            text = clean_text(raw) or None
        kept.append((stub, text))

    if not kept:
        kept = [(stub, None) for stub in fallback_stubs(query)]

    return [NormalizedResult(stub=stub, rank=i, text=text) for i, (stub, text) in enumerate(kept, start=1)]
