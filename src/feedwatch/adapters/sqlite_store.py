"""SQLite storage adapter.

Implements the core StorePort using a single key-value table in SQLite.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Set

from feedwatch.core.errors import NotFound, StoreUnavailable


class SQLiteStore:
    """Thin SQLite wrapper that satisfies the StorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - entries: one row per (channel, key) holding a serialized record
        """

        try:
            with self._connect() as conn:
                # entries is the per-channel namespace. Every row is either the
                # channel config (key "config") or an item dedup record.
                # Fields:
                # - channel: normalized channel key (@username or chat_id:<id>)
                # - entry_key: "config" or the item id
                # - entry_value: JSON record
                # - updated_at: last write time, for debugging only
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS entries (
                        channel TEXT NOT NULL,
                        entry_key TEXT NOT NULL,
                        entry_value TEXT NOT NULL,
                        updated_at TIMESTAMP NOT NULL,
                        PRIMARY KEY (channel, entry_key)
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to initialize {self._db_path}: {exc}") from exc

    def get(self, channel: str, key: str) -> str:
        """Return the stored value or raise NotFound."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT entry_value FROM entries WHERE channel = ? AND entry_key = ?",
                    (channel, key),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to read {key} for {channel}: {exc}") from exc
        if row is None:
            raise NotFound(channel, key)
        return row["entry_value"]

    def put(self, channel: str, key: str, value: str) -> None:
        """Upsert a value."""

        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO entries (channel, entry_key, entry_value, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(channel, entry_key) DO UPDATE SET
                        entry_value = excluded.entry_value,
                        updated_at = excluded.updated_at
                    """,
                    (channel, key, value, now.isoformat()),
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to write {key} for {channel}: {exc}") from exc

    def delete(self, channel: str, key: str) -> None:
        """Delete a key; absent keys are ignored."""

        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM entries WHERE channel = ? AND entry_key = ?",
                    (channel, key),
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to delete {key} for {channel}: {exc}") from exc

    def list_keys(self, channel: str) -> Set[str]:
        """Return every key in the channel namespace."""

        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT entry_key FROM entries WHERE channel = ?",
                    (channel,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to list keys for {channel}: {exc}") from exc
        return {row["entry_key"] for row in rows}

    def list_channels(self) -> Set[str]:
        """Return every channel that has at least one key."""

        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT DISTINCT channel FROM entries").fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Failed to list channels: {exc}") from exc
        return {row["channel"] for row in rows}
