"""Session segmentation, scoring and suggestion ranking (pure, no I/O)."""

from history_triage.detection.classifier import classify, hostname, root_domain, root_of
from history_triage.detection.feedback import record_ignore, set_preference
from history_triage.detection.models import (
    CategoryHit,
    CategoryMeta,
    HistoryItem,
    IntentRule,
    ScoreBreakdown,
    ScoredSession,
    Session,
    Suggestion,
)
from history_triage.detection.ranker import confidence_tier, detect_suggestions
from history_triage.detection.scorer import score_session
from history_triage.detection.segmenter import segment

__all__ = [
    "classify",
    "hostname",
    "root_domain",
    "root_of",
    "record_ignore",
    "set_preference",
    "CategoryHit",
    "CategoryMeta",
    "HistoryItem",
    "IntentRule",
    "ScoreBreakdown",
    "ScoredSession",
    "Session",
    "Suggestion",
    "confidence_tier",
    "detect_suggestions",
    "score_session",
    "segment",
]
