"""Tests for the session scorer."""

from datetime import datetime

import pytest

from history_triage.detection.models import HistoryItem, Session
from history_triage.detection.rules import category_meta
from history_triage.detection.scorer import (
    Tier,
    domain_variety,
    rapid_navigation,
    resolve_item,
    score_session,
    timing,
)

# Wednesday 2024-01-10 14:00 local time.
WEDNESDAY = datetime(2024, 1, 10, 14, 0).timestamp() * 1000
# Saturday 2024-01-13 14:00 local time.
SATURDAY = datetime(2024, 1, 13, 14, 0).timestamp() * 1000


def _session(urls, start=WEDNESDAY, step_ms=30_000):
    return Session(tuple(
        HistoryItem(url=url, last_visit_time=start + i * step_ms)
        for i, url in enumerate(urls)
    ))


YOUTUBE_SESSION = [
    "https://youtube.com/watch?x",
    "https://youtube.com/watch?y",
    "https://youtube.com/shorts",
    "https://youtube.com/feed",
    "https://youtube.com/explore",
]


def test_youtube_example():
    scored = score_session(_session(YOUTUBE_SESSION), {}, {})

    assert scored.breakdown.url_intent == 8
    assert scored.breakdown.domain_variety == pytest.approx(0.2)
    assert scored.breakdown.rapid_navigation == 0
    assert scored.breakdown.timing == 1
    assert scored.breakdown.work_signals == 0
    assert scored.score == pytest.approx(9.2)
    assert [(c.category, c.count) for c in scored.categories] == [
        ("entertainment", 3),
        ("social", 2),
    ]
    assert scored.categories[0].label == "Video & Entertainment"
    assert scored.categories[0].icon == "🎬"
    assert scored.categories[1].urls == YOUTUBE_SESSION[3:]
    assert scored.domains == ["youtube.com"]


def test_work_preference_skips_rules():
    prefs = {"youtube.com": "work"}
    scored = score_session(_session(YOUTUBE_SESSION), prefs, {})
    assert scored.categories == []
    assert scored.breakdown.url_intent == 0
    assert scored.breakdown.work_signals == 15
    assert scored.domains == ["youtube.com"]


def test_work_preference_falls_back_to_root_domain():
    urls = [u.replace("youtube.com", "m.youtube.com") for u in YOUTUBE_SESSION]
    scored = score_session(_session(urls), {"youtube.com": "work"}, {})
    assert scored.categories == []
    assert scored.domains == ["m.youtube.com"]


def test_exact_hostname_preference_wins_over_root():
    urls = ["https://m.youtube.com/watch"]
    prefs = {"m.youtube.com": "personal", "youtube.com": "work"}
    scored = score_session(_session(urls), prefs, {})
    assert scored.breakdown.url_intent == 3
    assert scored.breakdown.work_signals == 0


def test_personal_preference_boosts_and_still_classifies():
    scored = score_session(_session(YOUTUBE_SESSION), {"youtube.com": "personal"}, {})
    assert scored.breakdown.url_intent == 8 + 5
    assert sum(c.count for c in scored.categories) == 5


def test_personal_preference_on_unmatched_path():
    scored = score_session(_session(["https://example.com/"]), {"example.com": "personal"}, {})
    assert scored.breakdown.url_intent == 1
    assert scored.categories == []


def test_adaptive_memory_treats_domain_as_work():
    scored = score_session(_session(YOUTUBE_SESSION), {}, {"youtube.com": 3})
    assert scored.categories == []
    assert scored.breakdown.url_intent == 0
    assert scored.breakdown.work_signals == 10
    assert scored.domains == ["youtube.com"]


def test_adaptive_memory_below_threshold_has_no_effect():
    scored = score_session(_session(YOUTUBE_SESSION), {}, {"youtube.com": 2})
    assert scored.breakdown.work_signals == 0
    assert scored.breakdown.url_intent == 8


def test_personal_preference_takes_precedence_over_adaptive_memory():
    scored = score_session(
        _session(YOUTUBE_SESSION), {"youtube.com": "personal"}, {"youtube.com": 7}
    )
    assert scored.breakdown.work_signals == 0
    assert len(scored.categories) == 2


def test_negative_rule_adds_work_signal_without_category():
    urls = ["https://ads.example.com/adsmanager", "https://example.com/watch"]
    scored = score_session(_session(urls), {}, {})
    assert scored.breakdown.work_signals == 5
    assert [c.category for c in scored.categories] == ["entertainment"]


def test_score_never_negative():
    urls = [f"https://example.com/adsmanager/{i}" for i in range(10)]
    scored = score_session(_session(urls, start=SATURDAY), {}, {})
    assert scored.breakdown.work_signals == 50
    assert scored.score == 0


def test_work_signals_are_dampened():
    urls = ["https://example.com/watch", "https://example.com/watch", "https://example.com/settings"]
    scored = score_session(_session(urls, start=SATURDAY, step_ms=120_000), {}, {})
    assert scored.score == pytest.approx(4 + 0.2 - 0.6)


def test_categories_sorted_by_count():
    urls = [
        "https://a.com/cart",
        "https://a.com/feed",
        "https://a.com/profile",
        "https://a.com/explore",
    ]
    scored = score_session(_session(urls), {}, {})
    assert [c.category for c in scored.categories] == ["social", "shopping"]


def test_unresolvable_urls_skip_domain_set():
    urls = ["not a url", "https://example.com/watch"]
    scored = score_session(_session(urls), {}, {})
    assert scored.domains == ["example.com"]


def test_resolve_item_tiers():
    item = HistoryItem(url="https://www.youtube.com/watch", last_visit_time=WEDNESDAY)
    assert resolve_item(item, {"youtube.com": "work"}, {}).tier is Tier.WORK_PREFERENCE
    assert resolve_item(item, {}, {"youtube.com": 3}).tier is Tier.AUTO_WORK
    outcome = resolve_item(item, {"youtube.com": "personal"}, {"youtube.com": 3})
    assert outcome.tier is Tier.RULE
    assert outcome.personal_boost
    assert outcome.intent == 3
    plain = HistoryItem(url="https://www.youtube.com/", last_visit_time=WEDNESDAY)
    assert resolve_item(plain, {}, {}).tier is Tier.NONE


def test_personal_preference_is_a_boost_not_a_tier():
    assert {t.name for t in Tier} == {"WORK_PREFERENCE", "AUTO_WORK", "RULE", "NONE"}
    plain = HistoryItem(url="https://www.youtube.com/", last_visit_time=WEDNESDAY)
    outcome = resolve_item(plain, {"youtube.com": "personal"}, {})
    assert outcome.tier is Tier.NONE
    assert outcome.personal_boost
    assert outcome.intent == 1


def test_domain_variety_is_capped():
    assert domain_variety(1) == pytest.approx(0.2)
    assert domain_variety(10) == 2.0
    assert domain_variety(25) == 2.0


def test_rapid_navigation_tiers():
    # 11 pages in one minute
    assert rapid_navigation(_session(["https://a.com/"] * 11, step_ms=6_000)) == 2
    # 5 pages in one minute
    assert rapid_navigation(_session(["https://a.com/"] * 5, step_ms=15_000)) == 1
    # 5 pages in two minutes
    assert rapid_navigation(_session(["https://a.com/"] * 5, step_ms=30_000)) == 0


def test_rapid_navigation_needs_three_items_and_duration():
    assert rapid_navigation(_session(["https://a.com/"] * 2, step_ms=1)) == 0
    assert rapid_navigation(_session(["https://a.com/"] * 5, step_ms=0)) == 0


def test_timing_window():
    def at(day, hour, minute=0):
        return datetime(2024, 1, day, hour, minute).timestamp() * 1000

    assert timing(at(10, 9)) == 1
    assert timing(at(10, 17, 59)) == 1
    assert timing(at(10, 8, 59)) == 0
    assert timing(at(10, 18)) == 0
    assert timing(at(13, 14)) == 0  # Saturday
    assert timing(at(14, 14)) == 0  # Sunday
    assert timing(at(12, 10)) == 1  # Friday


def test_timing_out_of_range_start_is_zero():
    assert timing(13_350_000_000_000_000) == 0
    assert timing(float("inf")) == 0
    assert timing(float("nan")) == 0


def test_unknown_category_meta():
    meta = category_meta("gaming")
    assert meta.label == "gaming"
    assert meta.icon == "🔗"
