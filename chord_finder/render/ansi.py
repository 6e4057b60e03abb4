from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from chord_finder.sources.types import NormalizedResult, QualityTier

CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    official: str = _sgr(32, 1)  # green bold
    dim: str = _sgr(90)  # bright black
    warning: str = _sgr(33, 1)  # yellow bold
    reset: str = _sgr(0)


PLAIN_THEME = Theme(title="", official="", dim="", warning="", reset="")


def format_results(results: Sequence[NormalizedResult], *, manual_label: str, theme: Theme | None = None) -> str:
    """
    One block per result. Manual fallback links are drawn in the warning
    colour and never look like a real chord page.
    """
    th = theme or Theme()
    out: list[str] = []
    for r in results:
        s = r.stub
        if not s.extractable:
            out.append(f"{th.warning}{r.rank}. {s.title} [{manual_label}]{th.reset}")
            out.append(f"   {th.dim}{s.source_url}{th.reset}")
            out.append("")
            continue

        star = f" {th.official}★{th.reset}" if s.tier is QualityTier.OFFICIAL else ""
        out.append(f"{th.title}{r.rank}. {s.display}{th.reset}{star}")
        meta = " · ".join(x for x in (s.type, s.quality, s.source) if x)
        out.append(f"   {th.dim}{meta}{th.reset}")
        out.append(f"   {s.source_url}")
        if r.text:
            out.append("")
            out.extend(f"   {ln}" for ln in r.text.splitlines())
        out.append("")
    return "\n".join(out)


def format_sheet(title: str, text: str, *, theme: Theme | None = None) -> str:
    th = theme or Theme()
    return f"{th.title}♫ {title} ♫{th.reset}\n\n{text}\n"
