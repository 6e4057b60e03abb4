from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

import regex

# \p{Block=Cyrillic} is exactly U+0400..U+04FF
_CYRILLIC_RE = regex.compile(r"\p{Block=Cyrillic}")


class Script(str, Enum):
    CYRILLIC = "cyrillic"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Query:
    text: str

    @property
    def script(self) -> Script:
        if _CYRILLIC_RE.search(self.text):
            return Script.CYRILLIC
        return Script.OTHER


class QualityTier(IntEnum):
    """Total order used for ranking; higher is better."""

    PLAIN = 0
    ANNOTATED = 1
    OFFICIAL = 2

    @classmethod
    def from_signal(cls, type_: str, quality: str) -> "QualityTier":
        if type_.strip().lower() == "official" or "official" in quality.lower():
            return cls.OFFICIAL
        if quality.strip():
            return cls.ANNOTATED
        return cls.PLAIN


@dataclass(frozen=True, slots=True)
class ResultStub:
    title: str
    artist: str
    source_url: str
    type: str
    quality: str
    source: str
    # False for synthetic links to search pages that must be opened by hand
    extractable: bool = True
    tier: QualityTier = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tier", QualityTier.from_signal(self.type, self.quality))

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "Unknown song"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    BLOCKED = "blocked"
    NOT_DIRECT_PAGE = "not_direct_page"


REASON_TIMEOUT = "page took too long to load"
REASON_PROTECTED = "page is protected or could not be loaded"
REASON_UNRECOGNIZED = "content structure not recognized"
REASON_LISTING_PAGE = "search or listing page, not a direct chord page"


@dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    kind: OutcomeKind
    text: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, text: str) -> "ExtractionOutcome":
        return cls(OutcomeKind.SUCCESS, text=text)

    @classmethod
    def not_found(cls, reason: str = REASON_UNRECOGNIZED) -> "ExtractionOutcome":
        return cls(OutcomeKind.NOT_FOUND, reason=reason)

    @classmethod
    def blocked(cls, reason: str) -> "ExtractionOutcome":
        return cls(OutcomeKind.BLOCKED, reason=reason)

    @classmethod
    def not_direct_page(cls) -> "ExtractionOutcome":
        return cls(OutcomeKind.NOT_DIRECT_PAGE, reason=REASON_LISTING_PAGE)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass(frozen=True, slots=True)
class NormalizedResult:
    stub: ResultStub
    rank: int
    text: str | None = None

    def to_dict(self) -> dict[str, object]:
        s = self.stub
        return {
            "rank": self.rank,
            "title": s.title,
            "artist": s.artist,
            "url": s.source_url,
            "type": s.type,
            "quality": s.quality,
            "tier": s.tier.name.lower(),
            "source": s.source,
            "extractable": s.extractable,
            "text": self.text,
        }
