"""SQLite-backed key-value storage.

Holds one JSON document per key in a single ``kv_store`` table.  Uses sync
``sqlite3``: each lifecycle operation rewrites a handful of small JSON
arrays before returning, so blocking the event loop is negligible.

Every ``sqlite3`` failure is translated into the promoDesk persistence
errors so that the domain store can apply its warn-and-continue policy.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import structlog

from promodesk.interfaces.storage_provider import IStorageProvider
from promodesk.utils.errors import StorageReadError, StorageWriteError
from promodesk.utils.logging import get_logger

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO {table} (key, value)
VALUES (?, ?)
ON CONFLICT(key)
DO UPDATE SET value = excluded.value,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = "SELECT value FROM {table} WHERE key = ?;"

_ALL_KEYS_SQL = "SELECT key FROM {table} ORDER BY key;"


class SQLiteStorageProvider(IStorageProvider):
    """Per-key JSON storage in a SQLite file.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Parent directories are created
        on :meth:`initialize`.
    table_name:
        Table holding the key/value rows.
    """

    def __init__(self, db_path: str | Path, table_name: str = "kv_store") -> None:
        self._db_path = Path(db_path)
        self._table = table_name
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the table.  Must be called once before use."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(_CREATE_TABLE_SQL.format(table=self._table))
            conn.commit()
        finally:
            conn.close()

        self._logger.info(
            "storage_initialized",
            db_path=str(self._db_path),
            table=self._table,
        )

    # ------------------------------------------------------------------
    # IStorageProvider implementation
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        try:
            conn = self._connect()
            try:
                row = conn.execute(_SELECT_SQL.format(table=self._table), (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageReadError(
                message=f"Could not read key {key!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._connect()
            try:
                conn.execute(_UPSERT_SQL.format(table=self._table), (key, value))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageWriteError(
                message=f"Could not write key {key!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def keys(self) -> list[str]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute(_ALL_KEYS_SQL.format(table=self._table)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageReadError(
                message=f"Could not list keys: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return [row[0] for row in rows]

    def get_provider_name(self) -> str:
        return f"sqlite:{self._table}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        """Open a new SQLite connection with WAL mode."""
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn
