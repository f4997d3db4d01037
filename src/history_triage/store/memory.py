"""In-process preference store."""

from __future__ import annotations

import threading
from typing import Iterable

from history_triage.detection.feedback import record_ignore, set_preference
from history_triage.store.base import BasePreferenceStore


class InMemoryPreferenceStore(BasePreferenceStore):
    """Dict-backed store; reads return copies so callers get a snapshot."""

    def __init__(
        self,
        domain_prefs: dict[str, str] | None = None,
        ignore_counts: dict[str, int] | None = None,
        ignored_sessions: set[str] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._prefs = dict(domain_prefs or {})
        self._counts = dict(ignore_counts or {})
        self._ignored = set(ignored_sessions or ())

    def read_domain_preferences(self) -> dict[str, str]:
        with self._lock:
            return dict(self._prefs)

    def write_domain_preference(self, domain: str, value: str | None) -> dict[str, str]:
        with self._lock:
            self._prefs = set_preference(self._prefs, domain, value)
            return dict(self._prefs)

    def read_ignore_counters(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def write_ignore_counters(self, counts: dict[str, int]) -> None:
        with self._lock:
            self._counts = dict(counts)

    def increment_ignore_counters(
        self, suggestion_id: str, domains: Iterable[str]
    ) -> dict[str, int]:
        with self._lock:
            self._counts = record_ignore(suggestion_id, domains, self._counts)
            return dict(self._counts)

    def read_ignored_sessions(self) -> set[str]:
        with self._lock:
            return set(self._ignored)

    def add_ignored_session(self, suggestion_id: str) -> None:
        with self._lock:
            self._ignored.add(suggestion_id)
