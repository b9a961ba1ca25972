"""Device-local key-value store holding whole JSON documents."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

from .schema import ensure_schema

# Version of the JSON envelope written around every stored value.
PAYLOAD_VERSION = 1


class KeyValueStore:
    """Manages the kv_store table.

    Values are written whole as ``{"version": N, "data": ...}``. Values
    without an envelope are read as version 0 documents.
    """

    def __init__(self, db_path: str | Path = "~/.config/spicesync/spicesync.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_raw(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored document for ``key``, or ``default`` if absent.

        Raises:
            ValueError: If the stored value is not valid JSON.
        """
        raw = self.get_raw(key)
        if raw is None:
            return default
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Stored value for {key!r} is not valid JSON: {e}") from e
        if isinstance(payload, dict) and "version" in payload and "data" in payload:
            return payload["data"]
        return payload

    def set(self, key: str, value: Any) -> None:
        conn = self._get_conn()
        raw = json.dumps(
            {"version": PAYLOAD_VERSION, "data": value}, ensure_ascii=False
        )
        conn.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value,
                   updated_at = datetime('now', 'localtime')""",
            (key, raw),
        )
        conn.commit()

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
