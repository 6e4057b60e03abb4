from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from chord_finder.errors import SourceTimeout, SourceUnavailable

from .http import BROWSER_HEADERS, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
    "--disable-extensions",
    "--window-size=1920,1080",
]
VIEWPORT = {"width": 1920, "height": 1080}
SCROLL_STEP_PX = 100
MAX_SCROLL_STEPS = 200


def render_page(
    url: str,
    *,
    timeout_s: float = 45.0,
    headless: bool = True,
    user_agent: str = DEFAULT_USER_AGENT,
    human_pacing: bool = True,
    sleep: Callable[[float], None] = time.sleep,
    rng: random.Random | None = None,
) -> str:
    """
    Load `url` in a fresh Chromium and return the rendered HTML.

    The browser lives only for this call and is closed on every exit path.
    Randomized waits, pointer moves and a slow scroll are interleaved with
    navigation; together with navigation they must fit in `timeout_s`,
    otherwise SourceTimeout is raised.
    """
    rnd = rng or random.Random()
    deadline = time.monotonic() + timeout_s

    def remaining_ms() -> float:
        left = deadline - time.monotonic()
        if left <= 0:
            raise SourceTimeout(f"{url}: exceeded {timeout_s:g}s")
        return left * 1000.0

    def pause(lo: float, hi: float) -> None:
        if not human_pacing:
            return
        delay = rnd.uniform(lo, hi)
        if time.monotonic() + delay > deadline:
            raise SourceTimeout(f"{url}: exceeded {timeout_s:g}s")
        sleep(delay)

    logger.info("rendering %s", url)
    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=headless, args=LAUNCH_ARGS)
            try:
                page = browser.new_page(
                    viewport=VIEWPORT,
                    user_agent=user_agent,
                    extra_http_headers=BROWSER_HEADERS,
                )
                page.set_default_timeout(remaining_ms())

                pause(1.0, 3.0)
                page.goto(url, wait_until="domcontentloaded", timeout=remaining_ms())
                pause(2.0, 4.0)

                page.mouse.move(100, 100)
                pause(0.5, 1.0)
                page.mouse.move(300, 400)
                pause(0.3, 0.8)

                _scroll_half(page, pause, remaining_ms)
                pause(1.0, 2.0)

                html = page.content()
            finally:
                browser.close()
    except PlaywrightTimeoutError as e:
        raise SourceTimeout(f"{url}: {e}") from e
    except PlaywrightError as e:
        raise SourceUnavailable(f"{url}: {e}") from e

    logger.debug("rendered %s (%d bytes)", url, len(html))
    return html


def _scroll_half(page: Any, pause: Callable[[float, float], None], remaining_ms: Callable[[], float]) -> None:
    # reading speed: 100px every 100ms, down to the middle of the document
    height = page.evaluate("() => document.body ? document.body.scrollHeight : 0") or 0
    steps = min(int(height / 2 // SCROLL_STEP_PX) + 1, MAX_SCROLL_STEPS)
    for _ in range(steps):
        remaining_ms()
        page.mouse.wheel(0, SCROLL_STEP_PX)
        pause(0.1, 0.1)
