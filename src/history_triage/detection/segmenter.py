"""Split a history timeline into gap-delimited sessions."""

from __future__ import annotations

import logging
from typing import Iterable

from history_triage.detection.models import HistoryItem, Session
from history_triage.detection.rules import SESSION_GAP_MS

logger = logging.getLogger(__name__)


def segment(
    items: Iterable[HistoryItem],
    gap_ms: float = SESSION_GAP_MS,
) -> list[Session]:
    """Partition items into sessions ascending by visit time.

    Items without a URL or visit time are dropped. A new session starts
    whenever the gap to the previous item exceeds ``gap_ms``. Session size
    is not checked here.
    """
    valid = [i for i in items if i.url and i.last_visit_time]
    if not valid:
        return []
    valid.sort(key=lambda i: i.last_visit_time)

    sessions: list[Session] = []
    current = [valid[0]]
    for prev, item in zip(valid, valid[1:]):
        if item.last_visit_time - prev.last_visit_time > gap_ms:
            sessions.append(Session(tuple(current)))
            current = [item]
        else:
            current.append(item)
    sessions.append(Session(tuple(current)))

    logger.debug("Segmented %d items into %d sessions", len(valid), len(sessions))
    return sessions
