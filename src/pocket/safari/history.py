"""Safari browsing history, read from History.db."""

import logging
import shutil
import sqlite3
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from pocket.applescript import PermissionDeniedError, ScriptExecutionError, TargetNotFoundError
from pocket.safari.library import FULL_DISK_ACCESS_HINT

logger = logging.getLogger(__name__)

HISTORY_DB = Path.home() / "Library" / "Safari" / "History.db"

# Safari stores Core Data timestamps: seconds since 2001-01-01 UTC
MAC_EPOCH_OFFSET = 978307200

HISTORY_QUERY = """
    SELECT hi.url, hv.title, hv.visit_time, hi.visit_count
    FROM history_items hi
    JOIN history_visits hv ON hi.id = hv.history_item
    WHERE hv.visit_time > ?
"""


@dataclass(frozen=True)
class HistoryItem:
    """One visit from Safari history."""

    title: str
    url: str
    visit_time: datetime
    visit_count: int = 0


def mac_time_to_datetime(value: float) -> datetime:
    return datetime.fromtimestamp(value + MAC_EPOCH_OFFSET)


def datetime_to_mac_time(value: datetime) -> float:
    return value.timestamp() - MAC_EPOCH_OFFSET


@contextmanager
def _snapshot(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Open a copy of the database; Safari keeps the original locked."""
    with tempfile.TemporaryDirectory(prefix="pocket-safari-") as tmp:
        copy = Path(tmp) / "History.db"
        try:
            shutil.copy2(db_path, copy)
            for suffix in ("-wal", "-shm"):
                sidecar = db_path.with_name(db_path.name + suffix)
                if sidecar.exists():
                    shutil.copy2(sidecar, copy.with_name(copy.name + suffix))
        except FileNotFoundError as e:
            raise TargetNotFoundError(f"Safari history not found at {db_path}", context={"path": str(db_path)}) from e
        except PermissionError as e:
            raise PermissionDeniedError(
                f"Cannot read {db_path}. {FULL_DISK_ACCESS_HINT}", context={"path": str(db_path)}
            ) from e

        conn = sqlite3.connect(copy)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in search text match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_history(
    days: int = 7,
    search: str | None = None,
    limit: int = 50,
    db_path: Path = HISTORY_DB,
) -> list[HistoryItem]:
    """
    Recent visits, newest first.

    Args:
        days: How far back to look.
        search: Only visits whose title or URL contains this text.
        limit: Maximum number of visits.
        db_path: History database location.

    Raises:
        PermissionDeniedError: If History.db cannot be read.
    """
    cutoff = datetime_to_mac_time(datetime.now() - timedelta(days=days))
    query = HISTORY_QUERY
    params: list[object] = [cutoff]
    if search:
        query += " AND (hv.title LIKE ? ESCAPE '\\' OR hi.url LIKE ? ESCAPE '\\')"
        pattern = f"%{_escape_like(search)}%"
        params += [pattern, pattern]
    query += " ORDER BY hv.visit_time DESC LIMIT ?"
    params.append(limit)

    with _snapshot(db_path) as conn:
        try:
            rows = conn.execute(query, params).fetchall()
        except sqlite3.DatabaseError as e:
            raise ScriptExecutionError(f"Failed to query Safari history: {e}", context={"path": str(db_path)}) from e

    logger.debug("Read %d history rows", len(rows))
    return [
        HistoryItem(
            title=row["title"] or "",
            url=row["url"],
            visit_time=mac_time_to_datetime(row["visit_time"]),
            visit_count=row["visit_count"] or 0,
        )
        for row in rows
    ]
