"""URL intent classification and domain helpers."""

from __future__ import annotations

from urllib.parse import urlsplit

from history_triage.detection.models import IntentRule
from history_triage.detection.rules import URL_INTENT_RULES


def hostname(url: str | None) -> str | None:
    """Lower-cased hostname of ``url``, or None if it cannot be parsed."""
    if not url:
        return None
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts.hostname or None


def root_of(host: str) -> str:
    """Collapse a hostname to its last two labels.

    This approximates eTLD+1 and gets compound suffixes wrong
    (``bbc.co.uk`` -> ``co.uk``). Stored preferences and ignore counters are
    keyed by this form, so it must not change.
    """
    labels = host.split(".")
    return ".".join(labels[-2:]) if len(labels) > 2 else host


def root_domain(url: str | None) -> str | None:
    host = hostname(url)
    return root_of(host) if host else None


def url_path(url: str | None) -> str:
    """Lower-cased path plus query string; empty when unparsable."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if not parts.scheme:
        return ""
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return path.lower()


def classify(
    url: str | None,
    rules: tuple[IntentRule, ...] = URL_INTENT_RULES,
) -> IntentRule | None:
    """Return the first rule whose pattern occurs in the URL's path.

    First match wins: neither the longest pattern nor the highest score.
    """
    path = url_path(url)
    if not path:
        return None
    for rule in rules:
        if rule.match_pattern in path:
            return rule
    return None
