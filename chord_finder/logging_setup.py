from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# chatty at INFO/DEBUG and never interesting unless we are debugging
THIRD_PARTY_LOGGERS = ("urllib3", "charset_normalizer", "asyncio")


def _env_level(name: str) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return None
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else None


def setup_logging(debug: bool, *, env_var: str = "CHORD_FINDER_LOG_LEVEL") -> int:
    """
    WARNING by default so only failed sources show up; --debug for
    everything. `env_var` (e.g. CHORD_FINDER_LOG_LEVEL=info) wins over both.

    Returns the level that was applied.
    """
    level = _env_level(env_var)
    if level is None:
        level = logging.DEBUG if debug else logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else max(level, logging.WARNING))
    return level
