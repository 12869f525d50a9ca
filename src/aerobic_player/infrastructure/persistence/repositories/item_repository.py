"""SQLite implementation of the playlist item repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aerobic_player.domain.playback.items import ItemRecord
from aerobic_player.domain.playback.repository import ItemRepository
from aerobic_player.domain.shared.constants import DatabaseTables
from aerobic_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from aerobic_player.infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)


class SQLiteItemRepository(ItemRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_all(self) -> list[ItemRecord]:
        rows = await self._db.fetch_all(
            f"SELECT * FROM {DatabaseTables.TRACKS} ORDER BY position ASC, rowid ASC"
        )
        return [self._row_to_record(row) for row in rows]

    async def get(self, item_id: str) -> ItemRecord | None:
        row = await self._db.fetch_one(
            f"SELECT * FROM {DatabaseTables.TRACKS} WHERE id = ?",
            (item_id,),
        )
        return self._row_to_record(row) if row else None

    async def save(self, record: ItemRecord) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.TRACKS} (id, name, kind, position, duration, content)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                kind = excluded.kind,
                position = excluded.position,
                duration = excluded.duration,
                content = excluded.content
            """,
            self._record_to_params(record),
        )
        logger.debug(LogTemplates.ITEM_SAVED, record.id, record.order)

    async def delete(self, item_id: str) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                f"DELETE FROM {DatabaseTables.TRACKS} WHERE id = ?",
                (item_id,),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(LogTemplates.ITEM_DELETED, item_id)
        return deleted

    async def save_order(self, records: list[ItemRecord]) -> None:
        async with self._db.transaction() as conn:
            await conn.executemany(
                f"UPDATE {DatabaseTables.TRACKS} SET position = ? WHERE id = ?",
                [(record.order, record.id) for record in records],
            )
        logger.debug(LogTemplates.ITEM_ORDER_SAVED, len(records))

    def _record_to_params(self, record: ItemRecord) -> tuple[Any, ...]:
        return (
            record.id,
            record.name,
            record.kind,
            record.order,
            record.duration,
            record.content,
        )

    def _row_to_record(self, row: dict[str, Any]) -> ItemRecord:
        content = row.get("content")
        return ItemRecord(
            id=row["id"],
            name=row["name"],
            kind=row.get("kind") or "",
            order=row["position"],
            duration=row.get("duration"),
            content=bytes(content) if content is not None else None,
        )
