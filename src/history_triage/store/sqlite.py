"""SQLite-backed preference store.

State lives in a single key/value table with JSON values, one row per
mapping, so a read always returns a consistent snapshot of that mapping.
Read-modify-write operations run inside one BEGIN IMMEDIATE transaction,
so concurrent writers (threads or processes) serialize on the DB lock.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from pathlib import Path
from typing import Callable, Iterable

from history_triage.detection.feedback import record_ignore, set_preference
from history_triage.exceptions import (
    PreferenceStoreError,
    PreferenceStoreReadError,
    PreferenceStoreWriteError,
)
from history_triage.store.base import BasePreferenceStore

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(
    os.environ.get("HISTORY_TRIAGE_DB", Path.home() / ".history_triage" / "state.db")
)

PREFS_KEY = "domainPrefs"
IGNORE_COUNTS_KEY = "domainIgnoreCounts"
IGNORED_SESSIONS_KEY = "ignoredSessions"


class SQLitePreferenceStore(BasePreferenceStore):
    """Persist preferences, ignore counters and ignored suggestion ids."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH

    def _connect(
        self, error_cls: type[PreferenceStoreError] = PreferenceStoreReadError
    ) -> sqlite3.Connection:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit; transactions are opened explicitly with BEGIN IMMEDIATE
            conn = sqlite3.connect(str(self.db_path), isolation_level=None)
            conn.execute(
                "CREATE TABLE IF NOT EXISTS state (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            return conn
        except (OSError, sqlite3.Error) as e:
            raise error_cls(f"Failed to open state DB {self.db_path}: {e}") from e

    @staticmethod
    def _load(conn: sqlite3.Connection, key: str, default, kind: type):
        row = conn.execute("SELECT value FROM state WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        try:
            value = json.loads(row[0])
        except json.JSONDecodeError as e:
            raise PreferenceStoreReadError(f"Corrupt value stored under {key}: {e}") from e
        if not isinstance(value, kind):
            raise PreferenceStoreReadError(
                f"Corrupt value stored under {key}: expected {kind.__name__}, "
                f"got {type(value).__name__}"
            )
        return value

    @staticmethod
    def _store(conn: sqlite3.Connection, key: str, value) -> None:
        conn.execute(
            "INSERT INTO state (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, json.dumps(value, sort_keys=True)),
        )

    def _get(self, key: str, default, kind: type):
        conn = self._connect()
        try:
            return self._load(conn, key, default, kind)
        except sqlite3.Error as e:
            raise PreferenceStoreReadError(f"Failed reading {key}: {e}") from e
        finally:
            conn.close()

    def _set(self, key: str, value) -> None:
        conn = self._connect(PreferenceStoreWriteError)
        try:
            self._store(conn, key, value)
        except sqlite3.Error as e:
            raise PreferenceStoreWriteError(f"Failed writing {key}: {e}") from e
        finally:
            conn.close()

    def _update(self, key: str, default, kind: type, change: Callable):
        """Read, transform and write one value inside a single write transaction.

        ``change`` receives the current value and returns the new one, or
        None to leave the row untouched.
        """
        conn = self._connect(PreferenceStoreWriteError)
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                current = self._load(conn, key, default, kind)
                updated = change(current)
                if updated is not None:
                    self._store(conn, key, updated)
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
            return current if updated is None else updated
        except sqlite3.Error as e:
            raise PreferenceStoreWriteError(f"Failed updating {key}: {e}") from e
        finally:
            conn.close()

    def read_domain_preferences(self) -> dict[str, str]:
        return dict(self._get(PREFS_KEY, {}, dict))

    def write_domain_preference(self, domain: str, value: str | None) -> dict[str, str]:
        prefs = self._update(
            PREFS_KEY, {}, dict, lambda current: set_preference(current, domain, value)
        )
        logger.info("Domain preference for %s set to %s", domain, value)
        return dict(prefs)

    def read_ignore_counters(self) -> dict[str, int]:
        return _as_counters(self._get(IGNORE_COUNTS_KEY, {}, dict))

    def write_ignore_counters(self, counts: dict[str, int]) -> None:
        self._set(IGNORE_COUNTS_KEY, dict(counts))

    def increment_ignore_counters(
        self, suggestion_id: str, domains: Iterable[str]
    ) -> dict[str, int]:
        domains = list(domains)
        counts = self._update(
            IGNORE_COUNTS_KEY, {}, dict,
            lambda current: record_ignore(suggestion_id, domains, _as_counters(current)),
        )
        return _as_counters(counts)

    def read_ignored_sessions(self) -> set[str]:
        return set(self._get(IGNORED_SESSIONS_KEY, [], list))

    def add_ignored_session(self, suggestion_id: str) -> None:
        def add(current: list) -> list | None:
            if suggestion_id in current:
                return None
            return sorted({*current, suggestion_id})

        self._update(IGNORED_SESSIONS_KEY, [], list, add)


def _as_counters(raw: dict) -> dict[str, int]:
    try:
        return {str(k): int(v) for k, v in raw.items()}
    except (TypeError, ValueError) as e:
        raise PreferenceStoreReadError(f"Corrupt ignore counter in {IGNORE_COUNTS_KEY}: {e}") from e
