"""Durable key/value string storage for client state (bookmarks)."""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class MemoryStore:
    """Process-local store; contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SqliteStore:
    """Key/value store backed by a single sqlite table.

    Every call opens its own connection, so the store can be shared freely
    within one process.
    """

    def __init__(self, path: str):
        self.path = path
        self.ensure_db()

    def ensure_db(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        conn.commit()
        conn.close()
        logger.debug("kv_store ready at %s", self.path)

    def get(self, key: str) -> Optional[str]:
        conn = sqlite3.connect(self.path)
        row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        conn.close()
        if row:
            return row[0]
        return None

    def set(self, key: str, value: str) -> None:
        conn = sqlite3.connect(self.path)
        conn.execute(
            "INSERT INTO kv_store (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
            (key, value),
        )
        conn.commit()
        conn.close()

    def remove(self, key: str) -> None:
        conn = sqlite3.connect(self.path)
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
        conn.close()
