"""Data models for session detection."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class HistoryItem:
    """One browser history entry, keyed by URL."""

    url: str
    last_visit_time: float | None  # epoch milliseconds
    title: str = ""
    visit_count: int = 0


@dataclass(frozen=True)
class Session:
    """A gap-delimited run of history items, ascending by visit time."""

    items: tuple[HistoryItem, ...]

    @property
    def start(self) -> float:
        return self.items[0].last_visit_time

    @property
    def end(self) -> float:
        return self.items[-1].last_visit_time

    @property
    def duration_ms(self) -> float:
        return self.end - self.start

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(self.items)


@dataclass(frozen=True)
class IntentRule:
    """Path substring that signals personal (positive) or work (negative) intent."""

    match_pattern: str
    score: int
    category: str
    label: str


@dataclass(frozen=True)
class CategoryMeta:
    label: str
    icon: str


@dataclass
class CategoryHit:
    """Positive rule hits accumulated for one category within a session."""

    category: str
    label: str
    icon: str
    count: int = 0
    urls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Named components of a session score."""

    url_intent: float
    domain_variety: float
    rapid_navigation: int
    timing: int
    work_signals: float


@dataclass
class ScoredSession:
    score: float
    categories: list[CategoryHit]
    domains: list[str]
    breakdown: ScoreBreakdown


@dataclass
class Suggestion:
    """A ranked session worth reviewing, handed to the UI layer."""

    id: str
    session_start: float
    session_end: float
    total_items: int
    score: float
    confidence: str  # "low" | "medium" | "high"
    categories: list[CategoryHit]
    domains: list[str]
    urls: list[str]
    breakdown: ScoreBreakdown

    def to_dict(self) -> dict:
        """JSON-ready representation."""
        return asdict(self)
