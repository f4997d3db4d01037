"""Multi-signal session scorer.

Each item is resolved to exactly one :class:`ItemOutcome` by a fixed
precedence table, then outcomes are folded together with session-level
features into a single score:

    ===============  ===================================  ======================
    tier             condition                            contribution
    ===============  ===================================  ======================
    WORK_PREFERENCE  preference == "work"                 work +3, no rules
    AUTO_WORK        no preference, ignores >= 3          work +2, no rules
    RULE             intent rule matched                  +score / work +|score|
    NONE             nothing matched                      nothing
    ===============  ===================================  ======================

A "personal" preference is not a tier of its own: it sets
``personal_boost`` (intent +1), skips the ignore-count check and
falls through to RULE or NONE.

Preferences are looked up by exact hostname first, then by root domain.
Every item adds its hostname to the session's domain set whatever its tier.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from history_triage.detection.classifier import classify, hostname, root_of
from history_triage.detection.models import (
    CategoryHit,
    HistoryItem,
    IntentRule,
    ScoreBreakdown,
    ScoredSession,
    Session,
)
from history_triage.detection.rules import (
    AUTO_WORK_IGNORE_COUNT,
    AUTO_WORK_WEIGHT,
    DOMAIN_VARIETY_CAP,
    DOMAIN_VARIETY_DIVISOR,
    PERSONAL_PREFERENCE_BOOST,
    RAPID_MIN_ITEMS,
    RAPID_PPM_HIGH,
    RAPID_PPM_LOW,
    WORK_DAYS,
    WORK_HOURS,
    WORK_PREFERENCE_WEIGHT,
    WORK_WEIGHT_MULTIPLIER,
    category_meta,
)

logger = logging.getLogger(__name__)


class Tier(enum.Enum):
    WORK_PREFERENCE = "work_preference"
    AUTO_WORK = "auto_work"
    RULE = "rule"
    NONE = "none"


@dataclass(frozen=True)
class ItemOutcome:
    """How a single history item contributes to its session score."""

    tier: Tier
    domain: str | None
    intent: int = 0
    work: int = 0
    personal_boost: bool = False
    rule: IntentRule | None = None


def resolve_item(
    item: HistoryItem,
    domain_prefs: Mapping[str, str],
    ignore_counts: Mapping[str, int],
) -> ItemOutcome:
    """Apply the precedence table to one item."""
    domain = hostname(item.url)
    root = root_of(domain) if domain else None

    pref = None
    if domain:
        pref = domain_prefs.get(domain) or domain_prefs.get(root)

    if pref == "work":
        return ItemOutcome(Tier.WORK_PREFERENCE, domain, work=WORK_PREFERENCE_WEIGHT)

    boost = pref == "personal"
    if not boost and root and ignore_counts.get(root, 0) >= AUTO_WORK_IGNORE_COUNT:
        return ItemOutcome(Tier.AUTO_WORK, domain, work=AUTO_WORK_WEIGHT)

    intent = PERSONAL_PREFERENCE_BOOST if boost else 0
    rule = classify(item.url)
    if rule is None:
        return ItemOutcome(Tier.NONE, domain, intent=intent, personal_boost=boost)
    if rule.score < 0:
        return ItemOutcome(
            Tier.RULE, domain, intent=intent, work=abs(rule.score),
            personal_boost=boost, rule=rule,
        )
    return ItemOutcome(
        Tier.RULE, domain, intent=intent + rule.score,
        personal_boost=boost, rule=rule,
    )


def domain_variety(unique_domains: int) -> float:
    """Many unrelated domains lean personal, with diminishing returns."""
    return min(unique_domains / DOMAIN_VARIETY_DIVISOR, DOMAIN_VARIETY_CAP)


def rapid_navigation(session: Session) -> int:
    """0, 1 or 2 depending on pages viewed per minute."""
    if len(session) < RAPID_MIN_ITEMS:
        return 0
    duration_min = session.duration_ms / 60_000
    if duration_min <= 0:
        return 0
    ppm = len(session) / duration_min
    if ppm > RAPID_PPM_HIGH:
        return 2
    if ppm > RAPID_PPM_LOW:
        return 1
    return 0


def timing(start_ms: float) -> int:
    """1 when the session starts during local weekday business hours.

    Timestamps the platform cannot represent as a local time score 0.
    """
    try:
        started = datetime.fromtimestamp(start_ms / 1000)
    except (OverflowError, OSError, ValueError):
        return 0
    return int(started.weekday() in WORK_DAYS and started.hour in WORK_HOURS)


def score_session(
    session: Session,
    domain_prefs: Mapping[str, str] | None = None,
    ignore_counts: Mapping[str, int] | None = None,
) -> ScoredSession:
    """Score how likely a session is personal browsing inside a work context."""
    domain_prefs = domain_prefs or {}
    ignore_counts = ignore_counts or {}

    url_intent = 0
    work_signals = 0
    hits: dict[str, CategoryHit] = {}
    domains: dict[str, None] = {}

    for item in session:
        outcome = resolve_item(item, domain_prefs, ignore_counts)
        if outcome.domain:
            domains.setdefault(outcome.domain)
        url_intent += outcome.intent
        work_signals += outcome.work

        rule = outcome.rule
        if rule is None or rule.score <= 0:
            continue
        hit = hits.get(rule.category)
        if hit is None:
            meta = category_meta(rule.category)
            hit = hits[rule.category] = CategoryHit(rule.category, meta.label, meta.icon)
        hit.count += 1
        hit.urls.append(item.url)

    breakdown = ScoreBreakdown(
        url_intent=url_intent,
        domain_variety=domain_variety(len(domains)),
        rapid_navigation=rapid_navigation(session),
        timing=timing(session.start) if len(session) else 0,
        work_signals=work_signals,
    )
    total = (
        breakdown.url_intent
        + breakdown.domain_variety
        + breakdown.rapid_navigation
        + breakdown.timing
        - breakdown.work_signals * WORK_WEIGHT_MULTIPLIER
    )

    categories = sorted(hits.values(), key=lambda h: h.count, reverse=True)
    return ScoredSession(
        score=max(0.0, total),
        categories=categories,
        domains=list(domains),
        breakdown=breakdown,
    )
