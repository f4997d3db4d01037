"""Group flat history results by hostname for display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from history_triage.detection.classifier import hostname
from history_triage.detection.models import HistoryItem

UNKNOWN_DOMAIN = "(unknown)"


@dataclass
class DomainGroup:
    domain: str
    items: list[HistoryItem] = field(default_factory=list)
    total_visits: int = 0


def group_by_domain(items: Iterable[HistoryItem]) -> list[DomainGroup]:
    """Groups sorted by total visits (desc); items by last visit (desc)."""
    groups: dict[str, DomainGroup] = {}
    for item in items:
        domain = hostname(item.url) or UNKNOWN_DOMAIN
        group = groups.setdefault(domain, DomainGroup(domain))
        group.items.append(item)
        group.total_visits += item.visit_count or 0

    ordered = sorted(groups.values(), key=lambda g: g.total_visits, reverse=True)
    for group in ordered:
        group.items.sort(key=lambda i: i.last_visit_time or 0, reverse=True)
    return ordered
