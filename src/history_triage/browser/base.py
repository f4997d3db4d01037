"""Abstract base class for history sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from history_triage.detection.models import HistoryItem


class BaseHistorySource(ABC):
    """Abstract interface for reading browser history."""

    @abstractmethod
    def fetch_items(
        self,
        window_start_ms: float,
        window_end_ms: float,
        text: str = "",
        limit: int = 5000,
    ) -> list[HistoryItem]:
        """Items last visited inside the window, most recent first.

        Raises HistoryReadError when the history cannot be read at all, so
        callers can tell a failure apart from an empty window.
        """
        ...
