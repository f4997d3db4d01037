"""Parse raw browser history rows into normalized history items."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

import dateutil.parser as parser

from history_triage.detection.models import HistoryItem

# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_EPOCH_MS = 253_402_300_799_000


def parse_history_item(
    raw: dict,
    max_url_length: int = 2000,
    max_title_length: int = 300,
) -> HistoryItem | None:
    """Normalize one raw history row; returns None for filtered/invalid rows.

    Accepts both ``chrome.history`` export keys (``lastVisitTime``,
    ``visitCount``) and snake_case keys. The visit time may be epoch
    milliseconds or an ISO 8601 string.
    """
    url = (raw.get("url") or "").strip()
    if not url:
        return None
    if len(url) > max_url_length:
        url = url[:max_url_length]

    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        return None

    visit_time = to_epoch_ms(_first(raw, "lastVisitTime", "last_visit_time"))
    if visit_time is None:
        return None

    title = (raw.get("title") or "").strip()
    if len(title) > max_title_length:
        title = title[:max_title_length]

    try:
        visit_count = int(_first(raw, "visitCount", "visit_count") or 0)
    except (TypeError, ValueError):
        visit_count = 0

    return HistoryItem(
        url=url,
        last_visit_time=visit_time,
        title=title,
        visit_count=max(0, visit_count),
    )


def _first(raw: dict, *keys: str):
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def to_epoch_ms(value) -> float | None:
    """Epoch milliseconds from a number, datetime or ISO 8601 / numeric string.

    Values outside ``(0, MAX_EPOCH_MS]`` give None, which also drops NaN,
    infinities and Chrome's native microseconds-since-1601.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        ms = value.timestamp() * 1000
    elif isinstance(value, (int, float)):
        ms = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            ms = float(text)
        except ValueError:
            try:
                ms = parser.isoparse(text).timestamp() * 1000
            except (ValueError, OverflowError):
                return None
    return float(ms) if 0 < ms <= MAX_EPOCH_MS else None
