"""SQLite storage for playlist items and player settings.

Every operation opens its own aiosqlite connection. In-memory databases use a
named shared-cache URI, and one keepalive connection holds the data for the
lifetime of the ``Database``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from aerobic_player.domain.shared.constants import DatabaseTables, SQLPragmas
from aerobic_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from aerobic_player.config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

_URL_PREFIX = "sqlite:///"
_MEMORY = ":memory:"

SCHEMA = (
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.TRACKS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        kind TEXT NOT NULL DEFAULT '',
        position INTEGER NOT NULL,
        duration REAL,
        content BLOB
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_tracks_position ON {DatabaseTables.TRACKS}(position)",
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.SETTINGS} (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
)


class Database:
    """Item and settings store behind ``sqlite:///<path>`` or ``:memory:``."""

    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        self._path = url.removeprefix(_URL_PREFIX)
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connect_timeout = settings.connection_timeout_s if settings else 10

        # each in-memory Database gets its own shared-cache name
        self._memory_uri = f"file:aerobic-player-{uuid4().hex}?mode=memory&cache=shared"
        self._keepalive: aiosqlite.Connection | None = None
        self._initialized = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_memory(self) -> bool:
        return self._path == _MEMORY

    async def initialize(self) -> None:
        """Create the tables. Safe to call more than once."""
        if self._initialized:
            return

        if self.is_memory:
            self._keepalive = await self._connect()
        else:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        async with self.transaction() as conn:
            for statement in SCHEMA:
                await conn.execute(statement)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._path)

    async def _connect(self) -> aiosqlite.Connection:
        if self.is_memory:
            conn = await aiosqlite.connect(
                self._memory_uri, uri=True, timeout=self._connect_timeout
            )
        else:
            conn = await aiosqlite.connect(self._path, timeout=self._connect_timeout)
        conn.row_factory = aiosqlite.Row

        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))
        return conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection; commit on success, roll back on error."""
        conn = await self._connect()
        try:
            yield conn
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
        finally:
            await conn.close()

    async def execute(self, sql: str, parameters: tuple[Any, ...] = ()) -> None:
        """Run one write statement in its own transaction."""
        async with self.transaction() as conn:
            await conn.execute(sql, parameters)

    async def fetch_one(self, sql: str, parameters: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        async with self.transaction() as conn:
            async with conn.execute(sql, parameters) as cursor:
                row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, parameters: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        async with self.transaction() as conn:
            async with conn.execute(sql, parameters) as cursor:
                rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def close(self) -> None:
        """Drop the keepalive connection; an in-memory database is gone afterwards."""
        keepalive, self._keepalive = self._keepalive, None
        if keepalive is not None:
            await keepalive.close()
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)
