"""State transitions driven by explicit user actions.

These never run during detection. They return updated copies; persisting
the result is the caller's job.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from history_triage.detection.classifier import root_of
from history_triage.exceptions import InvalidPreferenceError

logger = logging.getLogger(__name__)

PREFERENCE_VALUES = frozenset({"work", "personal"})


def record_ignore(
    suggestion_id: str,
    domains: Iterable[str],
    ignore_counts: Mapping[str, int],
) -> dict[str, int]:
    """Increment the root-domain ignore counter for each dismissed domain."""
    updated = dict(ignore_counts)
    for domain in domains:
        if not domain:
            continue
        root = root_of(domain.lower())
        updated[root] = updated.get(root, 0) + 1
    logger.debug("Ignored %s; counters now %s", suggestion_id, updated)
    return updated


def set_preference(
    domain_prefs: Mapping[str, str],
    domain: str,
    value: str | None,
) -> dict[str, str]:
    """Set ``domain`` to "work"/"personal", or clear it when ``value`` is None."""
    if value is not None and value not in PREFERENCE_VALUES:
        raise InvalidPreferenceError(
            f"Invalid preference {value!r} for {domain}. "
            "Expected 'work', 'personal' or None."
        )
    updated = dict(domain_prefs)
    if value is None:
        updated.pop(domain, None)
    else:
        updated[domain] = value
    return updated
