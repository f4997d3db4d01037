"""Tests for suggestion detection and ranking."""

from datetime import datetime

import pytest

from history_triage.detection.models import HistoryItem
from history_triage.detection.ranker import confidence_tier, detect_suggestions, suggestion_id

WEDNESDAY = datetime(2024, 1, 10, 14, 0).timestamp() * 1000
SATURDAY_10AM = datetime(2024, 1, 13, 10, 0).timestamp() * 1000
HOUR_MS = 60 * 60 * 1000


def _items(urls, start, step_ms=60_000):
    return [
        HistoryItem(url=url, last_visit_time=start + i * step_ms, visit_count=1)
        for i, url in enumerate(urls)
    ]


def _youtube(start=WEDNESDAY):
    return _items(
        [
            "https://youtube.com/watch?x",
            "https://youtube.com/watch?y",
            "https://youtube.com/shorts",
            "https://youtube.com/feed",
            "https://youtube.com/explore",
        ],
        start,
        step_ms=30_000,
    )


def test_empty_input():
    assert detect_suggestions([], {}, {}) == []


def test_youtube_session_surfaces_with_high_confidence():
    (suggestion,) = detect_suggestions(_youtube(), {}, {})
    assert suggestion.id == f"session_{int(WEDNESDAY)}"
    assert suggestion.session_start == WEDNESDAY
    assert suggestion.session_end == WEDNESDAY + 120_000
    assert suggestion.total_items == 5
    assert suggestion.score == pytest.approx(9.2)
    assert suggestion.confidence == "high"
    assert [c.category for c in suggestion.categories] == ["entertainment", "social"]
    assert suggestion.urls == [
        "https://youtube.com/watch?x",
        "https://youtube.com/watch?y",
        "https://youtube.com/shorts",
        "https://youtube.com/feed",
        "https://youtube.com/explore",
    ]
    assert suggestion.domains == ["youtube.com"]


def test_sessions_below_min_size_are_discarded():
    assert detect_suggestions(_youtube()[:4], {}, {}) == []


def test_below_threshold_is_discarded():
    urls = ["https://a.com/feed"] + ["https://a.com/"] * 4
    assert detect_suggestions(_items(urls, SATURDAY_10AM), {}, {}) == []


def test_threshold_without_categories_is_discarded():
    # variety 2 + rapid 2 + timing 1 crosses the threshold with no rule hits.
    urls = [f"https://site{i}.com/" for i in range(10)]
    assert detect_suggestions(_items(urls, WEDNESDAY, step_ms=6_000), {}, {}) == []


def test_work_preference_suppresses_session():
    assert detect_suggestions(_youtube(), {"youtube.com": "work"}, {}) == []


def test_ignored_domain_suppresses_session():
    assert detect_suggestions(_youtube(), {}, {"youtube.com": 3}) == []


def test_returns_top_five_with_recency_tie_break():
    items = []
    starts = []
    # n watch pages + (5 - n) clip pages -> url intent 5 + n, score 5.2 + n
    for hour, n in enumerate([0, 1, 2, 3, 4, 5, 5]):
        start = SATURDAY_10AM + hour * HOUR_MS
        starts.append(start)
        urls = ["https://example.com/watch"] * n + ["https://example.com/clip"] * (5 - n)
        items.extend(_items(urls, start))

    suggestions = detect_suggestions(items, {}, {})

    assert len(suggestions) == 5
    assert [s.session_start for s in suggestions] == [
        starts[6], starts[5], starts[4], starts[3], starts[2],
    ]
    assert [round(s.score, 1) for s in suggestions] == [10.2, 10.2, 9.2, 8.2, 7.2]
    assert [s.confidence for s in suggestions] == ["high", "high", "high", "medium", "medium"]


def test_detect_is_deterministic():
    items = _youtube() + _youtube(start=WEDNESDAY + 2 * HOUR_MS)
    first = detect_suggestions(items, {}, {})
    second = detect_suggestions(list(reversed(items)), {}, {})
    assert [s.to_dict() for s in first] == [s.to_dict() for s in second]


def test_confidence_tier_boundaries():
    assert confidence_tier(9) == "high"
    assert confidence_tier(8.99) == "medium"
    assert confidence_tier(6) == "medium"
    assert confidence_tier(5.99) == "low"
    assert confidence_tier(4) == "low"


def test_suggestion_id():
    assert suggestion_id(1700000000000) == "session_1700000000000"
    assert suggestion_id(1700000000000.0) == "session_1700000000000"
    assert suggestion_id(1700000000000.5) == "session_1700000000000.5"


def test_to_dict():
    (suggestion,) = detect_suggestions(_youtube(), {}, {})
    data = suggestion.to_dict()
    assert data["confidence"] == "high"
    assert data["breakdown"]["url_intent"] == 8
    assert data["categories"][0]["count"] == 3


def test_unrepresentable_start_time_scores_without_timing():
    (suggestion,) = detect_suggestions(_youtube(start=13_350_000_000_000_000), {}, {})
    assert suggestion.breakdown.timing == 0
    assert suggestion.id == "session_13350000000000000"
