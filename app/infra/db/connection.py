# app/infra/db/connection.py
from __future__ import annotations

import contextlib
from typing import Any, AsyncIterator, Optional, Sequence

import aiosqlite


class Database:
    """
    Async SQLite helper:
    - opens a new connection per operation, so each call is its own transaction
    - sets row_factory to aiosqlite.Row
    - enables WAL + foreign keys
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @contextlib.asynccontextmanager
    async def _connect(self, wal: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        async with aiosqlite.connect(self._path) as conn:
            conn.row_factory = aiosqlite.Row
            if wal:
                await conn.execute("PRAGMA journal_mode=WAL;")
            # per-connection setting in sqlite
            await conn.execute("PRAGMA foreign_keys=ON;")
            yield conn

    async def executescript(self, sql: str) -> None:
        async with self._connect(wal=True) as conn:
            await conn.executescript(sql)
            await conn.commit()

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run one statement and commit. Returns the affected row count."""
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            await conn.commit()
            return cur.rowcount

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[aiosqlite.Row]:
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            return await cur.fetchone()

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            return list(await cur.fetchall())
