"""Turn a history timeline into a short, ranked list of suggestions."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from history_triage.detection.models import HistoryItem, ScoredSession, Session, Suggestion
from history_triage.detection.rules import (
    CONFIDENCE_THRESHOLD,
    HIGH_CONFIDENCE_SCORE,
    MAX_SUGGESTIONS,
    MEDIUM_CONFIDENCE_SCORE,
    MIN_SESSION_SIZE,
)
from history_triage.detection.scorer import score_session
from history_triage.detection.segmenter import segment

logger = logging.getLogger(__name__)


def confidence_tier(score: float) -> str:
    if score >= HIGH_CONFIDENCE_SCORE:
        return "high"
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return "medium"
    return "low"


def suggestion_id(session_start: float) -> str:
    # Two sessions can only share an id if they start on the same millisecond.
    start = int(session_start) if float(session_start).is_integer() else session_start
    return f"session_{start}"


def _build_suggestion(session: Session, scored: ScoredSession) -> Suggestion:
    return Suggestion(
        id=suggestion_id(session.start),
        session_start=session.start,
        session_end=session.end,
        total_items=len(session),
        score=scored.score,
        confidence=confidence_tier(scored.score),
        categories=scored.categories,
        domains=scored.domains,
        urls=[url for hit in scored.categories for url in hit.urls],
        breakdown=scored.breakdown,
    )


def detect_suggestions(
    items: Iterable[HistoryItem],
    domain_prefs: Mapping[str, str] | None = None,
    ignore_counts: Mapping[str, int] | None = None,
) -> list[Suggestion]:
    """Find sessions that look like personal browsing, best first.

    Sessions shorter than ``MIN_SESSION_SIZE`` items are treated as noise and
    never scored. A scored session is surfaced only when it reaches
    ``CONFIDENCE_THRESHOLD`` and has at least one concrete category hit;
    variety, timing and rapid navigation alone are not enough.
    """
    suggestions: list[Suggestion] = []
    for session in segment(items):
        if len(session) < MIN_SESSION_SIZE:
            continue
        scored = score_session(session, domain_prefs, ignore_counts)
        logger.debug(
            "Session at %s: %d items, score %.2f", session.start, len(session), scored.score
        )
        if scored.score < CONFIDENCE_THRESHOLD or not scored.categories:
            continue
        suggestions.append(_build_suggestion(session, scored))

    suggestions.sort(key=lambda s: (s.score, s.session_start), reverse=True)
    return suggestions[:MAX_SUGGESTIONS]
