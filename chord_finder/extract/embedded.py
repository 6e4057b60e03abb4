from __future__ import annotations

import html
import json
import re
from functools import lru_cache
from typing import Any

from chord_finder.errors import UnrecognizedStructure

STORE_MARKER = 'class="js-store"'


@lru_cache(maxsize=None)
def _attr_re(attr: str) -> re.Pattern[str]:
    return re.compile(r"(?<![\w-])" + re.escape(attr) + r'\s*=\s*"([^"]*)"')


def decode_embedded_state(raw: str) -> Any:
    """
    Entity-decode an attribute value, then parse it as JSON.

    `{&quot;a&quot;:1}` -> {"a": 1}
    """
    try:
        return json.loads(html.unescape(raw))
    except ValueError as e:
        raise UnrecognizedStructure(f"embedded state is not valid JSON: {e}") from e
    except RecursionError as e:
        raise UnrecognizedStructure("embedded state is nested too deeply") from e


def find_embedded_state(document: str, *, marker: str = STORE_MARKER, attr: str = "data-content") -> Any | None:
    """
    Locate the serialized state blob that follows `marker` and decode it.

    Returns None when the page carries no blob at all; raises
    UnrecognizedStructure when a blob is present but cannot be parsed.
    """
    start = document.find(marker)
    if start < 0:
        return None
    # only the tag that carries the marker; the attribute may come before it
    tag_start = document.rfind("<", 0, start)
    tag_end = document.find(">", start)
    if tag_end < 0:
        tag_end = len(document)
    m = _attr_re(attr).search(document, tag_start if tag_start >= 0 else start, tag_end)
    if m is None:
        return None
    return decode_embedded_state(m.group(1))


def dig(data: Any, *path: str) -> Any | None:
    cur = data
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur
