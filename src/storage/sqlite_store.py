"""
SQLite review store.

One row per module in `review_items`, keyed by module_id. Saving replaces
every row inside a single transaction.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from loguru import logger

from src.scheduling.errors import PersistenceReadError, PersistenceWriteError
from src.scheduling.models import ReviewRecord

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS review_items (
    module_id TEXT PRIMARY KEY,
    next_review TEXT NOT NULL,
    interval_days INTEGER DEFAULT 1,
    ease_factor REAL DEFAULT 2.5,
    repetition INTEGER DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_review_items_next_review ON review_items(next_review);
"""


class SqliteReviewStore:
    """
    SQLite-backed persistence for review records.

    Queries run synchronously inside the async methods; the database is
    a local file, so calls return quickly enough to skip a thread pool.
    """

    def __init__(self, db_path: Path):
        """
        Initialize the store.

        Args:
            db_path: Database file (created on first use)
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA_SQL)
            logger.info(f"SqliteReviewStore initialized at {self.db_path}")
        return self._conn

    async def get_review_items(self) -> list[ReviewRecord]:
        try:
            rows = self.conn.execute(
                "SELECT * FROM review_items ORDER BY rowid"
            ).fetchall()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceReadError(f"Cannot read review items from {self.db_path}: {e}") from e

        try:
            return [ReviewRecord.from_dict(dict(row)) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceReadError(f"Malformed review row in {self.db_path}: {e}") from e

    async def save_review_items(self, items: list[ReviewRecord]) -> None:
        try:
            with self.conn:
                self.conn.execute("DELETE FROM review_items")
                self.conn.executemany(
                    """
                    INSERT INTO review_items (
                        module_id, next_review, interval_days, ease_factor, repetition
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            item.module_id,
                            item.next_review.isoformat(),
                            item.interval_days,
                            item.ease_factor,
                            item.repetition,
                        )
                        for item in items
                    ],
                )
        except (OSError, sqlite3.Error) as e:
            raise PersistenceWriteError(f"Cannot write review items to {self.db_path}: {e}") from e

        logger.debug(f"Saved {len(items)} review items to {self.db_path}")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
