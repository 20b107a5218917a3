"""
SQLite Key-Value Storage.

Flat string records addressed by a fixed key, the on-disk counterpart of
browser local storage. Each store owns exactly one key.

Database location: ~/.quizrunner/state.db (":memory:" for throwaway use)
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from loguru import logger

from quizrunner.core.errors import StorageError

MEMORY = ":memory:"


class KeyValueStorage:
    """
    SQLite-backed string records.

    Every write commits before returning, so a mutation and its persisted
    record are never out of step.
    """

    DEFAULT_DB_PATH = Path.home() / ".quizrunner" / "state.db"

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize the storage.

        Args:
            db_path: Database file (defaults to ~/.quizrunner/state.db)
        """
        if db_path is None:
            db_path = self.DEFAULT_DB_PATH
        if str(db_path) != MEMORY:
            db_path = Path(db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.debug(f"KeyValueStorage initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
        return self._conn

    def _init_schema(self) -> None:
        self._execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cursor = self.conn.execute(sql, params)
            self.conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise StorageError(f"Storage operation failed on {self.db_path}: {e}") from e

    def get(self, key: str) -> str | None:
        """Return the raw record for key, or None if absent."""
        row = self._execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        """Write the full record for key."""
        self._execute(
            """
            INSERT INTO kv_store (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """,
            (key, value),
        )

    def remove(self, key: str) -> None:
        """Delete the record for key (no-op if absent)."""
        self._execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        rows = self._execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> KeyValueStorage:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
