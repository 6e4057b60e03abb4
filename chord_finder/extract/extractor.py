from __future__ import annotations

import logging
import re
from typing import Callable, Sequence

from chord_finder.errors import SourceTimeout, SourceUnavailable
from chord_finder.sources.types import (
    REASON_PROTECTED,
    REASON_TIMEOUT,
    REASON_UNRECOGNIZED,
    ExtractionOutcome,
)

from .strategies import ContentStrategy, PageDocument, default_strategies

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], str]

LISTING_URL_RE = re.compile(r"/search(?:\.php)?(?:[/?#]|$)|[?&]search_type=", re.IGNORECASE)


def is_listing_url(url: str) -> bool:
    return bool(LISTING_URL_RE.search(url))


class ContentExtractor:
    """
    Single URL in, single ExtractionOutcome out.

    Strategies run in order against one fetched document; the first one
    that yields text wins.
    """

    def __init__(
        self,
        fetch: Fetcher,
        strategies: Sequence[ContentStrategy] | None = None,
        *,
        listing_check: Callable[[str], bool] = is_listing_url,
    ):
        self.fetch = fetch
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.listing_check = listing_check

    def extract(self, url: str) -> ExtractionOutcome:
        if self.listing_check(url):
            logger.info("not a direct chord page, skipping: %s", url)
            return ExtractionOutcome.not_direct_page()

        try:
            html = self.fetch(url)
        except SourceTimeout as e:
            logger.warning("extraction timed out: %s", e)
            return ExtractionOutcome.blocked(REASON_TIMEOUT)
        except SourceUnavailable as e:
            logger.warning("extraction failed: %s", e)
            return ExtractionOutcome.blocked(REASON_PROTECTED)

        doc = PageDocument(url, html)
        for strategy in self.strategies:
            try:
                text = strategy.try_extract(doc)
            except Exception:
                logger.warning("strategy %s failed on %s", strategy.name, url, exc_info=True)
                continue
            if text:
                logger.info("extracted %d chars from %s via %s", len(text), url, strategy.name)
                return ExtractionOutcome.success(text)

        logger.info("no known chord container on %s", url)
        return ExtractionOutcome.not_found(REASON_UNRECOGNIZED)
