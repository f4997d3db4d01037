"""Unified exception hierarchy for history-triage."""


class HistoryTriageError(Exception):
    """Base exception for all history-triage errors."""


# History sources
class HistoryError(HistoryTriageError):
    """Base exception for browser history operations."""


class HistoryReadError(HistoryError):
    """Failed to read browser history."""


# Preference store
class PreferenceStoreError(HistoryTriageError):
    """Base exception for preference/ignore-state persistence."""


class PreferenceStoreReadError(PreferenceStoreError):
    """Failed to read persisted preferences or counters."""


class PreferenceStoreWriteError(PreferenceStoreError):
    """Failed to persist preferences or counters."""


# Feedback
class InvalidPreferenceError(HistoryTriageError, ValueError):
    """A domain preference value other than "work", "personal" or None."""
