from __future__ import annotations

import json
from dataclasses import dataclass
import os
from pathlib import Path

from chord_finder.i18n import DEFAULT_LANG, supported
from chord_finder.sources.http import DEFAULT_USER_AGENT


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "chord-finder"
    return Path.home() / ".config" / "chord-finder"


def _config_file() -> Path:
    return _config_dir() / "config.json"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default) not in ("0", "false", "False", "no")


@dataclass(frozen=True)
class AppConfig:
    # Storage
    data_dir: Path
    db_path: Path
    config_dir: Path

    # Locale
    lang: str

    # Sources, in priority order
    sources: tuple[str, ...]
    max_results: int
    parallel_search: bool

    # Fetching
    http_timeout_s: float
    render_timeout_s: float
    render_pages: bool  # extract through a real browser instead of plain HTTP
    headless: bool
    human_pacing: bool
    user_agent: str

    # Extraction
    min_content_chars: int


def load_config() -> AppConfig:
    xdg = os.getenv("XDG_DATA_HOME")
    data_dir = Path(xdg) if xdg else Path.home() / ".local" / "share"
    data_dir = data_dir / "chord-finder"

    sources_env = os.getenv("CHORD_FINDER_SOURCES", "ultimate_guitar,amdm")
    sources = tuple(s.strip() for s in sources_env.split(",") if s.strip())

    config_dir = _config_dir()
    lang = _load_lang(config_dir)

    return AppConfig(
        data_dir=data_dir,
        db_path=data_dir / "songs.sqlite3",
        config_dir=config_dir,
        lang=lang,
        sources=sources,
        max_results=int(os.getenv("CHORD_FINDER_MAX_RESULTS", "10")),
        parallel_search=_flag("CHORD_FINDER_PARALLEL", "1"),
        http_timeout_s=float(os.getenv("CHORD_FINDER_HTTP_TIMEOUT", "10.0")),
        render_timeout_s=float(os.getenv("CHORD_FINDER_RENDER_TIMEOUT", "45.0")),
        render_pages=_flag("CHORD_FINDER_RENDER", "1"),
        headless=_flag("CHORD_FINDER_HEADLESS", "1"),
        human_pacing=_flag("CHORD_FINDER_HUMAN_PACING", "1"),
        user_agent=os.getenv("CHORD_FINDER_USER_AGENT") or DEFAULT_USER_AGENT,
        min_content_chars=int(os.getenv("CHORD_FINDER_MIN_CONTENT_CHARS", "50")),
    )


def _load_lang(config_dir: Path) -> str:
    # Priority: config.json → CHORD_FINDER_LANG → "EN"
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
            code = supported(data.get("lang") or DEFAULT_LANG)
            if code:
                return code.upper()
        except (OSError, ValueError, AttributeError):
            pass
    code = supported(os.getenv("CHORD_FINDER_LANG"))
    return (code or DEFAULT_LANG).upper()


def save_config_lang(lang: str) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, str] = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            pass
    data["lang"] = lang.upper()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
