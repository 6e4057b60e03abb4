from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from functools import partial
from typing import Sequence
from urllib.parse import urlsplit

from chord_finder.config import AppConfig
from chord_finder.errors import InvalidInput, UnsupportedSource
from chord_finder.extract.extractor import ContentExtractor, Fetcher, is_listing_url
from chord_finder.extract.strategies import AMDM_SELECTORS, UG_SELECTORS, default_strategies
from chord_finder.i18n import t

from .amdm import AmdmSource
from .base import SiteAdapter
from .browser import render_page
from .http import fetch_html
from .normalize import clean_text, normalize
from .router import route
from .types import (
    REASON_TIMEOUT,
    ExtractionOutcome,
    NormalizedResult,
    OutcomeKind,
    Query,
    ResultStub,
)
from .ultimate_guitar import UltimateGuitarSource

logger = logging.getLogger(__name__)

# chords drawn over a video player, nothing to scrape
VIDEO_OVERLAY_DOMAINS = ("chordify.net",)


@dataclass(frozen=True, slots=True)
class ChordContent:
    text: str
    # None when no extraction was attempted (unsupported or video-overlay site)
    outcome: ExtractionOutcome | None

    @property
    def ok(self) -> bool:
        return self.outcome is not None and self.outcome.ok


class ChordService:
    def __init__(self, cfg: AppConfig, adapters: Sequence[SiteAdapter] | None = None):
        self.cfg = cfg
        self.adapters = list(adapters) if adapters is not None else self._build_adapters(cfg)

    @staticmethod
    def _build_adapters(cfg: AppConfig) -> list[SiteAdapter]:
        search_fetch: Fetcher = partial(fetch_html, timeout_s=cfg.http_timeout_s, user_agent=cfg.user_agent)
        page_fetch: Fetcher
        if cfg.render_pages:
            page_fetch = partial(
                render_page,
                timeout_s=cfg.render_timeout_s,
                headless=cfg.headless,
                user_agent=cfg.user_agent,
                human_pacing=cfg.human_pacing,
            )
        else:
            page_fetch = search_fetch

        out: list[SiteAdapter] = []
        for s in cfg.sources:
            name = s.strip().lower()
            if name in ("ultimate_guitar", "ultimate-guitar", "ug"):
                extractor = ContentExtractor(page_fetch, default_strategies(UG_SELECTORS, min_chars=cfg.min_content_chars))
                out.append(UltimateGuitarSource(fetch=search_fetch, extractor=extractor, max_results=cfg.max_results))
            elif name in ("amdm", "amdm.ru"):
                extractor = ContentExtractor(page_fetch, default_strategies(AMDM_SELECTORS, min_chars=cfg.min_content_chars))
                out.append(AmdmSource(fetch=search_fetch, extractor=extractor, max_results=cfg.max_results))
            else:
                logger.info("Unknown source '%s' in config, skipping", s)
        return out

    @property
    def supported_sources(self) -> str:
        return ", ".join(a.display_name for a in self.adapters)

    def adapter_for_url(self, url: str) -> SiteAdapter:
        for adapter in self.adapters:
            if adapter.handles(url):
                return adapter
        raise UnsupportedSource(url)

    def search_chords(self, query: str, *, extract_top: int = 0) -> list[NormalizedResult]:
        """
        Router -> adapters -> normalizer.

        With `extract_top` > 0 the first N extractable results also get
        their chord text (one page load each).
        """
        if not query or not query.strip():
            raise InvalidInput(t("error_empty_query"))

        q = Query(query.strip())
        adapters = route(q, self.adapters)
        logger.info("query %r (%s) -> %s", q.text, q.script.value, [a.name for a in adapters])

        stubs: list[ResultStub] = []
        for adapter, block in zip(adapters, self._run_searches(adapters, q.text)):
            for stub in block:
                if adapter.is_direct_url(stub.source_url):
                    stubs.append(stub)
                else:
                    logger.debug("%s: dropping non-direct result %r", adapter.name, stub.source_url)

        texts = self._extract_texts(stubs, extract_top) if extract_top > 0 else None
        return normalize(stubs, texts, query=q.text)

    def _run_searches(self, adapters: list[SiteAdapter], query: str) -> list[list[ResultStub]]:
        if not self.cfg.parallel_search or len(adapters) < 2:
            return [a.search(query) for a in adapters]

        blocks: dict[int, list[ResultStub]] = {}
        with ThreadPoolExecutor(max_workers=len(adapters), thread_name_prefix="chord_search") as pool:
            futures = {pool.submit(a.search, query): i for i, a in enumerate(adapters)}
            for fut in as_completed(futures):
                blocks[futures[fut]] = fut.result()
        # adapter priority, not completion order
        return [blocks[i] for i in range(len(adapters))]

    def _extract_texts(self, stubs: list[ResultStub], limit: int) -> dict[str, str]:
        texts: dict[str, str] = {}
        attempted: set[str] = set()
        for stub in stubs:
            if len(attempted) >= limit:
                break
            if not stub.extractable or stub.source_url in attempted:
                continue
            attempted.add(stub.source_url)
            try:
                adapter = self.adapter_for_url(stub.source_url)
            except UnsupportedSource:
                continue
            outcome = adapter.extract(stub.source_url)
            if outcome.ok and outcome.text:
                texts[stub.source_url] = outcome.text
            else:
                logger.info("no text for %s: %s", stub.source_url, outcome.reason)
        return texts

    def extract_chord_content(self, url: str) -> ChordContent:
        """
        Always returns something printable: chord text on success, otherwise
        guidance on what the user can do instead.
        """
        if not url or not url.strip():
            raise InvalidInput(t("error_empty_url"))
        url = url.strip()

        if is_listing_url(url):
            return ChordContent(t("guidance_listing_page"), ExtractionOutcome.not_direct_page())

        host = (urlsplit(url).hostname or "").lower()
        if any(host == d or host.endswith("." + d) for d in VIDEO_OVERLAY_DOMAINS):
            return ChordContent(t("guidance_video_overlay", sources=self.supported_sources), None)

        try:
            adapter = self.adapter_for_url(url)
        except UnsupportedSource:
            logger.info("unsupported source: %s", url)
            return ChordContent(t("guidance_unsupported", sources=self.supported_sources), None)

        outcome = adapter.extract(url)
        return ChordContent(self._outcome_text(outcome), outcome)

    @staticmethod
    def _outcome_text(outcome: ExtractionOutcome) -> str:
        if outcome.kind is OutcomeKind.SUCCESS and outcome.text:
            return clean_text(outcome.text)
        if outcome.kind is OutcomeKind.NOT_DIRECT_PAGE:
            return t("guidance_listing_page")
        if outcome.kind is OutcomeKind.BLOCKED:
            return t("guidance_timeout") if outcome.reason == REASON_TIMEOUT else t("guidance_protected")
        return t("guidance_not_found")
