from __future__ import annotations

import html
import json

import pytest

from chord_finder.config import AppConfig
from chord_finder.errors import SourceUnavailable
from chord_finder.i18n import set_lang


WONDERWALL_URL = "https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-chords-27596"
WONDERWALL_V2_URL = "https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-chords-1000"
WONDERWALL_OFFICIAL_URL = "https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-official-2000"
WONDERWALL_ADAMS_URL = "https://tabs.ultimate-guitar.com/tab/ryan-adams/wonderwall-chords-3000"

KINO_URL = "https://amdm.ru/akkordi/kino/99652/gruppa_krovi/"
KINO_SOLNCE_URL = "https://amdm.ru/akkordi/kino/99653/zvezda_po_imeni_solnce/"


def js_store(state: dict) -> str:
    payload = html.escape(json.dumps(state), quote=True)
    return f'<div class="js-store" data-content="{payload}"></div>'


def page(body: str) -> str:
    return f"<html><head><title>t</title></head><body>{body}</body></html>"


class FakeFetcher:
    """Stands in for fetch_html / render_page: url -> html from a dict."""

    def __init__(self, pages: dict[str, str] | None = None, *, default: str | None = None, error: Exception | None = None):
        self.pages = dict(pages or {})
        self.default = default
        self.error = error
        self.calls: list[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if url in self.pages:
            return self.pages[url]
        if self.default is not None:
            return self.default
        raise SourceUnavailable(f"{url}: 404 Not Found")


@pytest.fixture(autouse=True)
def _english():
    set_lang("EN")
    yield
    set_lang("EN")


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def cfg(tmp_path):
    return AppConfig(
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "songs.sqlite3",
        config_dir=tmp_path / "config",
        lang="EN",
        sources=("ultimate_guitar", "amdm"),
        max_results=10,
        parallel_search=True,
        http_timeout_s=1.0,
        render_timeout_s=1.0,
        render_pages=False,
        headless=True,
        human_pacing=False,
        user_agent="test-agent",
        min_content_chars=50,
    )


@pytest.fixture
def ug_search_html():
    results = [
        {
            "song_name": "Wonderwall",
            "artist_name": "Oasis",
            "tab_url": WONDERWALL_URL,
            "rating": 4.78,
            "votes": 3021,
            "type": "Chords",
            "version": 1,
        },
        {
            "song_name": "Wonderwall",
            "artist_name": "Oasis",
            "tab_url": WONDERWALL_V2_URL,
            "rating": 4.9,
            "votes": 51,
            "type": "Chords",
            "version": 2,
        },
        {
            "song_name": "Wonderwall",
            "artist_name": "Oasis",
            "tab_url": "https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-tabs-555",
            "rating": 5.0,
            "votes": 900,
            "type": "Tabs",
        },
        {
            "song_name": "Wonderwall",
            "artist_name": "Oasis",
            "tab_url": WONDERWALL_OFFICIAL_URL,
            "rating": 3.0,
            "type": "Official",
        },
        {
            "song_name": "Wonderwall",
            "artist_name": "Ryan Adams",
            "tab_url": WONDERWALL_ADAMS_URL,
            "rating": 0,
            "type": "Chords",
        },
        {"song_name": "Broken", "artist_name": "Nobody", "type": "Chords"},
        {"marketing_type": "TabPro"},
    ]
    return page(js_store({"store": {"page": {"data": {"results": results}}}}))


@pytest.fixture
def ug_rows_html():
    return page(
        """
        <div class="dyhP1"><div class="SUEyv">ARTIST</div><div class="SGCxQ">SONG</div></div>
        <div class="dyhP1">
          <div class="SUEyv"><a href="https://www.ultimate-guitar.com/artist/oasis_6916">Oasis</a></div>
          <div class="SGCxQ"><a tabcount="1" href="https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-chords-27596">Wonderwall</a></div>
          <div class="D8BqY">4.8 rating</div>
          <div>chords</div>
        </div>
        <div class="dyhP1">
          <div class="SUEyv"></div>
          <div class="SGCxQ"><a href="#" data-url="/tab/the-beatles/let-it-be-chords-17427">Let It Be<span data-tip="Official version"></span></a></div>
          <div>chords</div>
        </div>
        <div class="dyhP1">
          <div class="SUEyv"><a href="https://www.ultimate-guitar.com/artist/ghost_1">Ghost</a></div>
          <div class="SGCxQ"><a href="#">Nowhere</a></div>
        </div>
        <div class="dyhP1">
          <div class="SUEyv"><a href="https://www.ultimate-guitar.com/artist/radiohead_2">Radiohead</a></div>
          <div class="SGCxQ"><a href="/tab/radiohead/creep-chords-4169">Creep<svg><path fill="#00E148"></path></svg></a></div>
          <div>chords</div>
        </div>
        <div class="dyhP1">
          <div class="SUEyv"></div>
          <div class="SGCxQ"><a href="https://www.ultimate-guitar.com/contribution/submit/tabs">Add a tab</a></div>
        </div>
        <div class="dyhP1">
          <div class="SUEyv"><a href="https://www.ultimate-guitar.com/artist/oasis_6916">Oasis</a></div>
          <div class="SGCxQ"><a href="https://tabs.ultimate-guitar.com/tab/oasis/wonderwall-chords-1000">Wonderwall (ver 2)</a></div>
          <div>chords</div>
        </div>
        """
    )


@pytest.fixture
def amdm_search_html():
    return page(
        """
        <div class="search_result"><a href="/akkordi/kino/99652/gruppa_krovi/">Кино - Группа крови</a></div>
        <div class="search_result"><a href="https://amdm.ru/akkordi/kino/99653/zvezda_po_imeni_solnce/">Звезда по имени Солнце</a></div>
        <div class="search_result"><span>без ссылки</span></div>
        <div class="search_result"><a href="/search/?q=кино">Ещё результаты</a></div>
        <div class="search_result"><a href="#">broken</a></div>
        """
    )


@pytest.fixture
def ug_tab_html():
    content = "[Verse]\r\n[tab][ch]Em7[/ch]   [ch]G[/ch]\r\nToday is gonna be the day[/tab]\r\n"
    state = {"store": {"page": {"data": {"tab_view": {"wiki_tab": {"content": content}}}}}}
    return page(js_store(state) + "<pre>decoy</pre>")


@pytest.fixture
def amdm_song_html():
    text = "Am           C\nТёплое место, но улицы ждут\nDm           G\nОтпечатков наших ног"
    return page(f'<pre class="decor">Am</pre><div class="b-podbor__text"><pre>{text}</pre></div>')


@pytest.fixture
def html_page():
    return page


@pytest.fixture
def state_page():
    def make(state: dict, extra: str = "") -> str:
        return page(js_store(state) + extra)

    return make
