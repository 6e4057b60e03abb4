from __future__ import annotations

from typing import Sequence

from .base import SiteAdapter
from .types import Query, Script


def route(query: Query, adapters: Sequence[SiteAdapter]) -> list[SiteAdapter]:
    """
    Cyrillic queries go to Cyrillic archives only, everything else to the
    Latin ones. Adapter order (priority) is kept.
    """
    want = Script.CYRILLIC if query.script is Script.CYRILLIC else Script.OTHER
    return [a for a in adapters if a.script is want]
