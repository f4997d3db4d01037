"""Preference and ignore-state persistence backends."""

from history_triage.store.base import BasePreferenceStore
from history_triage.store.memory import InMemoryPreferenceStore
from history_triage.store.sqlite import SQLitePreferenceStore

__all__ = [
    "BasePreferenceStore",
    "InMemoryPreferenceStore",
    "SQLitePreferenceStore",
]
