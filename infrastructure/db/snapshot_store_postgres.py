from __future__ import annotations

from typing import Optional

import psycopg2

from domain.errors import StorageError
from domain.repositories import SnapshotStore


class PostgresSnapshotStore(SnapshotStore):
    """
    Postgres-backed implementation of `SnapshotStore`.

    Uses a dedicated `snapshot_slots` table keyed by slot name, with the
    same layout as the SQLite store so snapshots can be moved between them.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._ensure_table()

    def _get_connection(self):
        return psycopg2.connect(self._dsn)

    def _ensure_table(self) -> None:
        try:
            with self._get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        CREATE TABLE IF NOT EXISTS snapshot_slots (
                            slot TEXT PRIMARY KEY,
                            payload TEXT NOT NULL
                        )
                        """
                    )
                    conn.commit()
        except psycopg2.Error as exc:
            raise StorageError(f"Cannot initialise snapshot table: {exc}") from exc

    def read(self, slot: str) -> Optional[str]:
        try:
            with self._get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT payload FROM snapshot_slots WHERE slot = %s",
                        (slot,),
                    )
                    row = cur.fetchone()
        except psycopg2.Error as exc:
            raise StorageError(f"Cannot read {slot}: {exc}") from exc
        if not row:
            return None
        return row[0]

    def write(self, slot: str, payload: str) -> None:
        try:
            with self._get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO snapshot_slots (slot, payload)
                        VALUES (%s, %s)
                        ON CONFLICT (slot)
                        DO UPDATE SET payload = EXCLUDED.payload
                        """,
                        (slot, payload),
                    )
                    conn.commit()
        except psycopg2.Error as exc:
            raise StorageError(f"Cannot write {slot}: {exc}") from exc

    def remove(self, slot: str) -> None:
        try:
            with self._get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM snapshot_slots WHERE slot = %s", (slot,))
                    conn.commit()
        except psycopg2.Error as exc:
            raise StorageError(f"Cannot remove {slot}: {exc}") from exc
