"""
Message catalogues for user-facing text.

One JSON file per language next to this module. Keys missing from a
translation fall back to the English text, and keys missing everywhere
come back unchanged.
"""

from __future__ import annotations

import json
import logging
from importlib.resources import files

logger = logging.getLogger(__name__)

SUPPORTED_LANGS = ("en", "ru")
DEFAULT_LANG = "en"

_current = DEFAULT_LANG
_strings: dict[str, str] = {}


def supported(lang: str | None) -> str | None:
    """Lower-case code for `lang` if there is a catalogue for it, else None."""
    code = (lang or "").strip().lower()
    return code if code in SUPPORTED_LANGS else None


def _read_catalogue(lang: str) -> dict[str, str]:
    path = files(__name__) / f"{lang}.json"
    try:
        return dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        logger.warning("cannot read %s message catalogue: %s", lang, e)
        return {}


def set_lang(lang: str | None) -> None:
    global _current, _strings
    _current = supported(lang) or DEFAULT_LANG
    strings = _read_catalogue(_current)
    if _current != DEFAULT_LANG:
        strings = {**_read_catalogue(DEFAULT_LANG), **strings}
    _strings = strings


def current_lang() -> str:
    return _current.upper()


def t(key: str, **kwargs: str | int) -> str:
    if not _strings:
        set_lang(_current)
    s = _strings.get(key, key)
    if not kwargs:
        return s
    try:
        return s.format(**kwargs)
    except (KeyError, IndexError):
        return s


set_lang(DEFAULT_LANG)
