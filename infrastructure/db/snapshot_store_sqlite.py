from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from domain.errors import StorageError
from domain.repositories import SnapshotStore

logger = logging.getLogger(__name__)


class SqliteSnapshotStore(SnapshotStore):
    """
    SQLite-backed implementation of `SnapshotStore`.

    Owns the `snapshot_slots` table, one row per named slot. It is
    self-initialising: the table is created if needed.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_table(self) -> None:
        try:
            with self._get_connection() as conn:
                cur = conn.cursor()
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS snapshot_slots (
                        slot TEXT PRIMARY KEY,
                        payload TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot initialise {self._db_path}: {exc}") from exc

    def read(self, slot: str) -> Optional[str]:
        try:
            with self._get_connection() as conn:
                cur = conn.cursor()
                cur.execute("SELECT payload FROM snapshot_slots WHERE slot = ?", (slot,))
                row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot read {slot}: {exc}") from exc
        if not row:
            return None
        return row[0]

    def write(self, slot: str, payload: str) -> None:
        try:
            with self._get_connection() as conn:
                cur = conn.cursor()
                cur.execute(
                    """
                    INSERT INTO snapshot_slots (slot, payload)
                    VALUES (?, ?)
                    ON CONFLICT (slot)
                    DO UPDATE SET payload = excluded.payload
                    """,
                    (slot, payload),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot write {slot}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(payload), slot)

    def remove(self, slot: str) -> None:
        try:
            with self._get_connection() as conn:
                cur = conn.cursor()
                cur.execute("DELETE FROM snapshot_slots WHERE slot = ?", (slot,))
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot remove {slot}: {exc}") from exc
