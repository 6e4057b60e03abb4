from __future__ import annotations

import logging

import requests

from chord_finder.errors import SourceTimeout, SourceUnavailable

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Upgrade-Insecure-Requests": "1",
}


def fetch_html(
    url: str,
    *,
    timeout_s: float = 10.0,
    user_agent: str = DEFAULT_USER_AGENT,
    session: requests.Session | None = None,
) -> str:
    """
    Single GET, no retries.

    Raises SourceTimeout / SourceUnavailable instead of requests exceptions.
    """
    sess = session or requests
    headers = {"User-Agent": user_agent, **BROWSER_HEADERS}
    try:
        r = sess.get(url, headers=headers, timeout=timeout_s)
        r.raise_for_status()
    except requests.Timeout as e:
        raise SourceTimeout(f"{url}: timed out after {timeout_s:g}s") from e
    except requests.RequestException as e:
        raise SourceUnavailable(f"{url}: {e}") from e
    logger.debug("fetched %s (%d bytes)", url, len(r.text))
    return r.text
