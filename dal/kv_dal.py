"""Async Data Access Layer for the KV_STORE table.

The annotation session is mirrored as one opaque byte value under a single
key. `KeyValueDAL` keeps that value in SQLite through
`utils.database_init.AsyncDatabaseInitializer`; `InMemoryKeyValueStore`
offers the same interface without a database.
"""

from __future__ import annotations

import time
from typing import Dict, Optional

from utils.database_init import AsyncDatabaseInitializer


class KeyValueDAL:
    """Byte-oriented key/value access backed by SQLite.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def get(self, key: str) -> Optional[bytes]:
        """Return the value stored under `key`, or None if absent."""
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT value FROM KV_STORE WHERE key = ?", (key,))
            row = await cur.fetchone()
            if row is None:
                return None
            value = row[0]
            return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    async def put(self, key: str, value: bytes) -> None:
        """Insert or replace the value stored under `key`."""
        async with self._db.connection() as conn:
            await conn.execute(
                """
                INSERT INTO KV_STORE (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, int(time.time())),
            )
            await conn.commit()

    async def delete(self, key: str) -> bool:
        """Delete `key`. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM KV_STORE WHERE key = ?", (key,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)


class InMemoryKeyValueStore:
    """Dictionary-backed stand-in for `KeyValueDAL`."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self.data: Dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    async def put(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None
