"""Read-only access to Safari and Chrome history databases."""

from __future__ import annotations

import logging
import shutil
import sqlite3
import tempfile
from pathlib import Path

from history_triage.browser.base import BaseHistorySource
from history_triage.browser.parser import parse_history_item
from history_triage.detection.models import HistoryItem
from history_triage.exceptions import HistoryReadError

logger = logging.getLogger(__name__)

SAFARI_HISTORY_PATH = Path.home() / "Library" / "Safari" / "History.db"
CHROME_BASE_PATH = Path.home() / "Library" / "Application Support" / "Google" / "Chrome"

# Seconds from 1970-01-01 to 2001-01-01 (Safari/WebKit epoch).
APPLE_EPOCH_OFFSET = 978307200
# Seconds from 1601-01-01 to 1970-01-01 (Chrome epoch).
CHROME_EPOCH_OFFSET = 11644473600


class BrowserHistoryReader(BaseHistorySource):
    """Read browser history from local Safari and Chrome SQLite databases.

    Produces one item per URL, carrying the URL's most recent visit inside
    the requested window and its total visit count.
    """

    def __init__(
        self,
        safari_path: Path | None = None,
        chrome_base_path: Path | None = None,
        include_safari: bool = True,
        include_chrome: bool = True,
    ) -> None:
        self.safari_path = safari_path or SAFARI_HISTORY_PATH
        self.chrome_base_path = chrome_base_path or CHROME_BASE_PATH
        self.include_safari = include_safari
        self.include_chrome = include_chrome
        self.last_errors: dict[str, str] = {}

    def fetch_items(
        self,
        window_start_ms: float,
        window_end_ms: float,
        text: str = "",
        limit: int = 5000,
    ) -> list[HistoryItem]:
        """Fetch items from enabled browser sources.

        The `limit` is applied per enabled source and again to the merged
        result.
        """
        per_source_limit = max(1, limit)
        rows: list[dict] = []
        errors: list[HistoryReadError] = []
        self.last_errors = {}

        if self.include_safari:
            try:
                rows.extend(self._fetch_safari_rows(window_start_ms, window_end_ms, text, per_source_limit))
            except HistoryReadError as e:
                errors.append(e)
                self.last_errors["safari"] = str(e)
                logger.warning("Safari history fetch failed: %s", e)
        if self.include_chrome:
            try:
                rows.extend(self._fetch_chrome_rows(window_start_ms, window_end_ms, text, per_source_limit))
            except HistoryReadError as e:
                errors.append(e)
                self.last_errors["chrome"] = str(e)
                logger.warning("Chrome history fetch failed: %s", e)

        if not rows and errors:
            raise errors[0]

        items = [item for item in map(parse_history_item, rows) if item is not None]
        items.sort(key=lambda i: i.last_visit_time, reverse=True)
        return items[:per_source_limit]

    def _fetch_safari_rows(
        self, start_ms: float, end_ms: float, text: str, limit: int
    ) -> list[dict]:
        """Fetch Safari URLs last visited inside the window."""
        if not self.safari_path.exists():
            logger.info("Safari history DB not found at %s", self.safari_path)
            return []

        safari_start = start_ms / 1000 - APPLE_EPOCH_OFFSET
        safari_end = end_ms / 1000 - APPLE_EPOCH_OFFSET
        pattern = _like_pattern(text)

        try:
            conn = sqlite3.connect(f"file:{self.safari_path}?mode=ro", uri=True)
            conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise HistoryReadError(
                "Cannot open Safari History.db. "
                "Enable Full Disk Access for your terminal if needed."
            ) from e

        try:
            item_columns = {
                str(row["name"])
                for row in conn.execute("PRAGMA table_info(history_items)").fetchall()
            }
            visit_columns = {
                str(row["name"])
                for row in conn.execute("PRAGMA table_info(history_visits)").fetchall()
            }
            if "title" in visit_columns:
                title_expr = "COALESCE(MAX(hv.title), '')"
            elif "title" in item_columns:
                title_expr = "COALESCE(hi.title, '')"
            else:
                title_expr = "''"
            visit_count_expr = "COALESCE(hi.visit_count, 1)" if "visit_count" in item_columns else "COUNT(hv.id)"

            rows = conn.execute(
                f"""
                SELECT
                    COALESCE(hi.url, '') AS url,
                    {title_expr} AS title,
                    {visit_count_expr} AS visit_count,
                    MAX(hv.visit_time) AS last_visit
                FROM history_visits hv
                JOIN history_items hi ON hi.id = hv.history_item
                WHERE hv.visit_time >= ? AND hv.visit_time <= ?
                  AND (hi.url LIKE 'http://%' OR hi.url LIKE 'https://%')
                GROUP BY hi.id
                HAVING COALESCE(hi.url, '') LIKE ? ESCAPE '\\' OR {title_expr} LIKE ? ESCAPE '\\'
                ORDER BY last_visit DESC
                LIMIT ?
                """,
                (safari_start, safari_end, pattern, pattern, limit),
            ).fetchall()
        except sqlite3.Error as e:
            raise HistoryReadError(f"Failed querying Safari history: {e}") from e
        finally:
            conn.close()

        results: list[dict] = []
        for row in rows:
            results.append({
                "url": row["url"],
                "title": row["title"],
                "visitCount": int(row["visit_count"] or 1),
                "lastVisitTime": self._safari_ts_to_ms(row["last_visit"]),
            })
        return results

    def _fetch_chrome_rows(
        self, start_ms: float, end_ms: float, text: str, limit: int
    ) -> list[dict]:
        """Fetch Chrome URLs last visited inside the window, across profiles."""
        history_paths = self._chrome_history_paths(self.chrome_base_path)
        if not history_paths:
            logger.info("Chrome history DBs not found under %s", self.chrome_base_path)
            return []

        chrome_start = int((start_ms / 1000 + CHROME_EPOCH_OFFSET) * 1_000_000)
        chrome_end = int((end_ms / 1000 + CHROME_EPOCH_OFFSET) * 1_000_000)
        pattern = _like_pattern(text)

        results: list[dict] = []
        for history_path in history_paths:
            profile = history_path.parent.name
            db_copy = self._copy_chrome_db(history_path)
            if not db_copy:
                continue
            conn: sqlite3.Connection | None = None
            try:
                conn = sqlite3.connect(str(db_copy))
                conn.row_factory = sqlite3.Row
                rows = conn.execute(
                    """
                    SELECT
                        COALESCE(u.url, '') AS url,
                        COALESCE(u.title, '') AS title,
                        COALESCE(u.visit_count, 0) AS visit_count,
                        u.last_visit_time AS visit_time
                    FROM urls u
                    WHERE u.last_visit_time >= ? AND u.last_visit_time <= ?
                      AND (u.url LIKE ? ESCAPE '\\' OR u.title LIKE ? ESCAPE '\\')
                      AND (u.url LIKE 'http://%' OR u.url LIKE 'https://%')
                    ORDER BY u.last_visit_time DESC
                    LIMIT ?
                    """,
                    (chrome_start, chrome_end, pattern, pattern, limit),
                ).fetchall()
            except sqlite3.Error as e:
                logger.warning("Failed querying Chrome history (%s): %s", profile, e)
                rows = []
            finally:
                if conn is not None:
                    conn.close()
                db_copy.unlink(missing_ok=True)

            for row in rows:
                results.append({
                    "url": row["url"],
                    "title": row["title"],
                    "visitCount": int(row["visit_count"] or 0),
                    "lastVisitTime": self._chrome_ts_to_ms(row["visit_time"]),
                })

        return results

    @staticmethod
    def _chrome_history_paths(base_path: Path) -> list[Path]:
        if not base_path.exists():
            return []

        paths = []
        for child in base_path.iterdir():
            if not child.is_dir():
                continue
            history = child / "History"
            if not history.exists():
                continue
            if child.name in {"System Profile"}:
                continue
            paths.append(history)

        paths.sort()
        return paths

    @staticmethod
    def _copy_chrome_db(path: Path) -> Path | None:
        """Chrome locks History DB; query a temporary copy instead."""
        try:
            with tempfile.NamedTemporaryFile(prefix="chrome-history-", suffix=".db", delete=False) as tmp:
                tmp_path = Path(tmp.name)
            shutil.copy2(path, tmp_path)
            return tmp_path
        except OSError as e:
            logger.warning("Failed to copy Chrome history DB %s: %s", path, e)
            return None

    @staticmethod
    def _safari_ts_to_ms(ts: float | int | None) -> float | None:
        if ts is None:
            return None
        try:
            return (float(ts) + APPLE_EPOCH_OFFSET) * 1000
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _chrome_ts_to_ms(ts: int | None) -> float | None:
        if ts is None:
            return None
        try:
            return (int(ts) / 1_000_000 - CHROME_EPOCH_OFFSET) * 1000
        except (TypeError, ValueError):
            return None


def _like_pattern(text: str) -> str:
    escaped = (text or "").replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
