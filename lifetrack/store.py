"""SQLite-backed key/value store. Every value is kept as JSON text."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from lifetrack.config import get_db_path as _config_get_db_path

log = logging.getLogger(__name__)

PROFILE_KEY = "profile"
ROUTINES_KEY = "routines"
SESSIONS_KEY = "studySessions"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


def _get_db_path() -> Path:
    """Return the store file path from config (or default)."""
    return _config_get_db_path()


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


class Store:
    """Durable key/value persistence.

    ``get`` never raises: a missing key, an unreadable row or a value that
    is not valid JSON all count as absent and yield the caller's default.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @classmethod
    def open(cls, db_path: Optional[Path] = None) -> "Store":
        return cls(get_connection(db_path))

    def get(self, key: str, default: Any = None) -> Any:
        try:
            row = self.conn.execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error:
            log.warning("Could not read %r from the store.", key, exc_info=True)
            return default
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            log.warning("Stored value for %r is corrupt; using default.", key)
            return default

    def set(self, key: str, value: Any) -> bool:
        """Serialize ``value`` and commit it, replacing any prior value.

        Returns False when the write could not be committed (locked or
        closed database); the previous value stays in place.
        """
        try:
            self.conn.execute(
                """INSERT INTO kv (key, value, updated_at) VALUES (?, ?, datetime('now'))
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                  updated_at = excluded.updated_at""",
                (key, json.dumps(value)),
            )
            self.conn.commit()
        except sqlite3.Error:
            log.warning("Could not write %r to the store.", key, exc_info=True)
            self._rollback()
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            self.conn.commit()
        except sqlite3.Error:
            log.warning("Could not delete %r from the store.", key, exc_info=True)
            self._rollback()
            return False
        return True

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except sqlite3.Error:
            log.debug("Rollback failed", exc_info=True)

    def keys(self) -> list[str]:
        rows = self.conn.execute("SELECT key FROM kv ORDER BY key ASC").fetchall()
        return [r["key"] for r in rows]

    def close(self) -> None:
        self.conn.close()
