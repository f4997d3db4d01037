"""Static detection configuration: intent rules, category metadata, thresholds.

Rule order is part of the configuration. The classifier returns the first
rule whose pattern occurs in the URL path, so ``"/reels"`` must stay ahead
of ``"/reel"`` and so on.
"""

from __future__ import annotations

from types import MappingProxyType

from history_triage.detection.models import CategoryMeta, IntentRule

# Items further apart than this start a new session (30 minutes).
SESSION_GAP_MS = 30 * 60 * 1000

MIN_SESSION_SIZE = 5
CONFIDENCE_THRESHOLD = 4
MAX_SUGGESTIONS = 5

# After this many ignores, a root domain is treated as work.
AUTO_WORK_IGNORE_COUNT = 3

# Work evidence is dampened so one work page cannot cancel a whole session.
WORK_WEIGHT_MULTIPLIER = 0.6

WORK_PREFERENCE_WEIGHT = 3
PERSONAL_PREFERENCE_BOOST = 1
AUTO_WORK_WEIGHT = 2

DOMAIN_VARIETY_DIVISOR = 5
DOMAIN_VARIETY_CAP = 2.0

RAPID_MIN_ITEMS = 3
RAPID_PPM_LOW = 3
RAPID_PPM_HIGH = 8

WORK_DAYS = range(0, 5)  # Monday..Friday, datetime.weekday()
WORK_HOURS = range(9, 18)

HIGH_CONFIDENCE_SCORE = 9
MEDIUM_CONFIDENCE_SCORE = 6

URL_INTENT_RULES: tuple[IntentRule, ...] = (
    # Entertainment
    IntentRule("/watch", 2, "entertainment", "Video"),
    IntentRule("/shorts", 2, "entertainment", "Video"),
    IntentRule("/clip", 1, "entertainment", "Video"),
    IntentRule("/video", 1, "entertainment", "Video"),
    IntentRule("/stream", 1, "entertainment", "Video"),
    IntentRule("/live", 1, "entertainment", "Video"),
    # Social
    IntentRule("/reels", 2, "social", "Social"),
    IntentRule("/reel", 2, "social", "Social"),
    IntentRule("/story", 1, "social", "Social"),
    IntentRule("/post", 1, "social", "Social"),
    IntentRule("/feed", 1, "social", "Social"),
    IntentRule("/profile", 1, "social", "Social"),
    IntentRule("/explore", 1, "social", "Social"),
    IntentRule("/trending", 1, "social", "Social"),
    # Shopping
    IntentRule("/cart", 2, "shopping", "Shopping"),
    IntentRule("/checkout", 3, "shopping", "Shopping"),
    IntentRule("/wishlist", 1, "shopping", "Shopping"),
    IntentRule("/product", 1, "shopping", "Shopping"),
    IntentRule("/item/", 1, "shopping", "Shopping"),
    IntentRule("/dp/", 1, "shopping", "Shopping"),  # Amazon
    IntentRule("/buy", 2, "shopping", "Shopping"),
    IntentRule("/order", 1, "shopping", "Shopping"),
    # Work (negative, suppresses flagging)
    IntentRule("/adsmanager", -5, "work", "Ads Manager"),
    IntentRule("/business", -4, "work", "Business"),
    IntentRule("/analytics", -4, "work", "Analytics"),
    IntentRule("/dashboard", -4, "work", "Dashboard"),
    IntentRule("/admin", -3, "work", "Admin"),
    IntentRule("/studio", -3, "work", "Studio"),
    IntentRule("/manage", -3, "work", "Manage"),
    IntentRule("/creator", -2, "work", "Creator Tools"),
    IntentRule("/report", -2, "work", "Reports"),
    IntentRule("/docs", -2, "work", "Docs"),
    IntentRule("/api", -2, "work", "API"),
    IntentRule("/settings", -1, "work", "Settings"),
    IntentRule("/campaigns", -3, "work", "Campaigns"),
    IntentRule("/insights", -2, "work", "Insights"),
)

CATEGORY_META: MappingProxyType[str, CategoryMeta] = MappingProxyType({
    "entertainment": CategoryMeta("Video & Entertainment", "🎬"),
    "social": CategoryMeta("Social Media", "📱"),
    "shopping": CategoryMeta("Online Shopping", "🛍"),
    "work": CategoryMeta("Work Activity", "💼"),
})

DEFAULT_CATEGORY_ICON = "🔗"


def category_meta(category: str) -> CategoryMeta:
    """Display metadata for a category, falling back to the raw name."""
    return CATEGORY_META.get(category) or CategoryMeta(category, DEFAULT_CATEGORY_ICON)
