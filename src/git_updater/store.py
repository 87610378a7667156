"""SQLite site-option store.

Mirrors the host's option tables: single-site installs key rows by
``options.option_name``, multisite installs by ``sitemeta.meta_key``. Values
are stored as JSON text.

All operations catch ``aiosqlite.Error`` internally and degrade gracefully:
reads return ``None``, writes and deletes report failure through their
return value. Values that cannot be encoded as JSON are refused the same
way. Errors are logged with ``exc_info=True``.
"""

from __future__ import annotations

import json
from typing import Any

import aiosqlite
import structlog
from pydantic_core import to_jsonable_python

log = structlog.get_logger()

# multisite -> (table, key column, value column)
_TABLES: dict[bool, tuple[str, str, str]] = {
    False: ("options", "option_name", "option_value"),
    True: ("sitemeta", "meta_key", "meta_value"),
}


class OptionStore:
    """aiosqlite-backed option store implementing OptionStoreProtocol."""

    def __init__(self, db: aiosqlite.Connection, *, multisite: bool = False) -> None:
        self._db = db
        self._table, self._key, self._value = _TABLES[multisite]

    async def init_db(self) -> None:
        """Create the option table. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(
            f"CREATE TABLE IF NOT EXISTS {self._table} ("
            f"{self._key} TEXT PRIMARY KEY, "
            f"{self._value} TEXT NOT NULL)"
        )
        await self._db.commit()

    async def get_option(self, name: str) -> Any | None:
        """Read and decode an option. Returns ``None`` when absent or unreadable."""
        try:
            cursor = await self._db.execute(
                f"SELECT {self._value} FROM {self._table} WHERE {self._key} = ?",
                (name,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return json.loads(row[0])
        except aiosqlite.Error:
            log.warning("option_read_error", option=name, exc_info=True)
            return None
        except json.JSONDecodeError:
            log.warning("option_decode_error", option=name, exc_info=True)
            return None

    async def update_option(self, name: str, value: Any) -> bool:
        """Insert or replace an option. Returns False on failure.

        Pydantic models, datetimes and other types pydantic knows how to
        serialise are stored in their JSON form.
        """
        try:
            encoded = json.dumps(value, default=to_jsonable_python)
        except (TypeError, ValueError):
            log.warning("option_encode_error", option=name, exc_info=True)
            return False

        try:
            await self._db.execute(
                f"INSERT OR REPLACE INTO {self._table} ({self._key}, {self._value}) "
                "VALUES (?, ?)",
                (name, encoded),
            )
            await self._db.commit()
            return True
        except aiosqlite.Error:
            log.warning("option_write_error", option=name, exc_info=True)
            return False

    async def delete_option(self, name: str) -> bool:
        try:
            cursor = await self._db.execute(
                f"DELETE FROM {self._table} WHERE {self._key} = ?", (name,)
            )
            await self._db.commit()
            return cursor.rowcount > 0
        except aiosqlite.Error:
            log.warning("option_delete_error", option=name, exc_info=True)
            return False

    async def delete_like(self, pattern: str, limit: int) -> int:
        """Delete at most ``limit`` rows whose key matches a SQL LIKE pattern.

        Returns the number of rows deleted, 0 on failure.
        """
        try:
            cursor = await self._db.execute(
                f"DELETE FROM {self._table} WHERE rowid IN ("
                f"SELECT rowid FROM {self._table} WHERE {self._key} LIKE ? LIMIT ?)",
                (pattern, limit),
            )
            await self._db.commit()
            return cursor.rowcount
        except aiosqlite.Error:
            log.warning("option_delete_like_error", pattern=pattern, exc_info=True)
            return 0
