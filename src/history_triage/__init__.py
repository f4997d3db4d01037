"""Flag browsing sessions that mix personal browsing into work history."""

from history_triage.detection import (
    HistoryItem,
    Suggestion,
    classify,
    detect_suggestions,
    record_ignore,
    score_session,
    set_preference,
)
from history_triage.service import HistoryTriage

__all__ = [
    "HistoryItem",
    "HistoryTriage",
    "Suggestion",
    "classify",
    "detect_suggestions",
    "record_ignore",
    "score_session",
    "set_preference",
]
