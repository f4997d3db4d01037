"""Abstract base class for preference / ignore-state persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class BasePreferenceStore(ABC):
    """Key-value state written only by explicit user actions."""

    @abstractmethod
    def read_domain_preferences(self) -> dict[str, str]:
        """Domain -> "work" | "personal"."""
        ...

    @abstractmethod
    def write_domain_preference(self, domain: str, value: str | None) -> dict[str, str]:
        """Set or clear (``value=None``) one preference; returns the new mapping."""
        ...

    @abstractmethod
    def read_ignore_counters(self) -> dict[str, int]:
        """Root domain -> number of times it was ignored."""
        ...

    @abstractmethod
    def write_ignore_counters(self, counts: dict[str, int]) -> None:
        """Replace all ignore counters."""
        ...

    @abstractmethod
    def increment_ignore_counters(
        self, suggestion_id: str, domains: Iterable[str]
    ) -> dict[str, int]:
        """Atomically add one ignore per root domain; returns the new counters.

        Concurrent calls must not lose increments.
        """
        ...

    @abstractmethod
    def read_ignored_sessions(self) -> set[str]:
        """Suggestion ids the user dismissed."""
        ...

    @abstractmethod
    def add_ignored_session(self, suggestion_id: str) -> None:
        ...
