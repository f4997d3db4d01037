"""High-level entry point wiring history sources and stores to detection."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime

from history_triage.browser.base import BaseHistorySource
from history_triage.browser.grouping import DomainGroup, group_by_domain
from history_triage.browser.parser import to_epoch_ms
from history_triage.browser.reader import BrowserHistoryReader
from history_triage.detection.models import HistoryItem, Suggestion
from history_triage.detection.ranker import detect_suggestions
from history_triage.exceptions import HistoryTriageError
from history_triage.store.base import BasePreferenceStore
from history_triage.store.sqlite import SQLitePreferenceStore

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

SUGGESTION_WINDOW_DAYS = 7
SUGGESTION_MAX_RESULTS = 5000
SEARCH_WINDOW_DAYS = 90
SEARCH_MAX_RESULTS = 1000


class HistoryTriage:
    """Suggest personal-browsing sessions to clean up and record feedback.

    Args:
        source: Where history comes from (defaults to local Safari + Chrome).
        store: Where preferences and ignore state persist (defaults to SQLite
            at ``$HISTORY_TRIAGE_DB``).

    Read failures from either adapter propagate unchanged; an empty list
    always means nothing qualified.
    """

    def __init__(
        self,
        source: BaseHistorySource | None = None,
        store: BasePreferenceStore | None = None,
    ) -> None:
        self.source = source or BrowserHistoryReader()
        self.store = store or SQLitePreferenceStore()

    # ---- Sync methods ----

    def get_suggestions(
        self,
        now: datetime | str | float | None = None,
        days: int = SUGGESTION_WINDOW_DAYS,
    ) -> list[Suggestion]:
        """Detect suggestions over the recent window, minus ignored ones."""
        end_ms = self._resolve_now(now)
        items = self.source.fetch_items(
            end_ms - days * DAY_MS, end_ms, limit=SUGGESTION_MAX_RESULTS
        )
        domain_prefs = self.store.read_domain_preferences()
        ignore_counts = self.store.read_ignore_counters()
        ignored = self.store.read_ignored_sessions()

        suggestions = detect_suggestions(items, domain_prefs, ignore_counts)
        visible = [s for s in suggestions if s.id not in ignored]
        logger.info(
            "Detected %d suggestions from %d items (%d hidden as ignored)",
            len(suggestions), len(items), len(suggestions) - len(visible),
        )
        return visible

    def ignore_suggestion(self, suggestion_id: str, domains: list[str]) -> dict[str, int]:
        """Dismiss a suggestion and bump ignore counters for its domains."""
        self.store.add_ignored_session(suggestion_id)
        return self.store.increment_ignore_counters(suggestion_id, domains)

    def set_domain_preference(self, domain: str, value: str | None) -> dict[str, str]:
        """Mark a domain "work" or "personal"; None removes the override."""
        return self.store.write_domain_preference(domain, value)

    def get_domain_preferences(self) -> dict[str, str]:
        return self.store.read_domain_preferences()

    def search_history(
        self,
        query: str,
        days: int = SEARCH_WINDOW_DAYS,
        now: datetime | str | float | None = None,
    ) -> list[HistoryItem]:
        """Items whose URL or title contains ``query``, most recent first."""
        end_ms = self._resolve_now(now)
        return self.source.fetch_items(
            end_ms - days * DAY_MS, end_ms, text=query.strip(), limit=SEARCH_MAX_RESULTS
        )

    def search_history_grouped(
        self,
        query: str,
        days: int = SEARCH_WINDOW_DAYS,
        now: datetime | str | float | None = None,
    ) -> list[DomainGroup]:
        return group_by_domain(self.search_history(query, days=days, now=now))

    @staticmethod
    def _resolve_now(now: datetime | str | float | None) -> float:
        if now is None:
            return time.time() * 1000
        resolved = to_epoch_ms(now)
        if resolved is None:
            raise HistoryTriageError(f"Cannot interpret {now!r} as a point in time")
        return resolved

    # ---- Async wrappers (asyncio.to_thread) ----

    async def aget_suggestions(self, **kwargs) -> list[Suggestion]:
        """Async version of get_suggestions."""
        return await asyncio.to_thread(self.get_suggestions, **kwargs)

    async def aignore_suggestion(self, suggestion_id: str, domains: list[str]) -> dict[str, int]:
        """Async version of ignore_suggestion."""
        return await asyncio.to_thread(self.ignore_suggestion, suggestion_id, domains)

    async def aset_domain_preference(self, domain: str, value: str | None) -> dict[str, str]:
        """Async version of set_domain_preference."""
        return await asyncio.to_thread(self.set_domain_preference, domain, value)

    async def asearch_history(self, query: str, **kwargs) -> list[HistoryItem]:
        """Async version of search_history."""
        return await asyncio.to_thread(self.search_history, query, **kwargs)
