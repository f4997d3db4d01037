"""Browser history data access (Safari + Chrome, macOS)."""

from history_triage.browser.base import BaseHistorySource
from history_triage.browser.grouping import DomainGroup, group_by_domain
from history_triage.browser.parser import parse_history_item
from history_triage.browser.reader import BrowserHistoryReader

__all__ = [
    "BaseHistorySource",
    "BrowserHistoryReader",
    "DomainGroup",
    "group_by_domain",
    "parse_history_item",
]
