"""
Integration Tests for the SQLite persistence layer

Tests for:
- Database initialization and connection handling
- SQLiteItemRepository
- SQLiteSettingsRepository

Uses an in-memory SQLite database.
"""

import pytest

from aerobic_player.domain.playback.configuration import PlayerSettings
from aerobic_player.domain.playback.items import ItemRecord
from aerobic_player.infrastructure.persistence.database import Database
from aerobic_player.infrastructure.persistence.repositories.settings_repository import (
    SQLiteSettingsRepository,
)


def record(item_id, order=0, **kwargs):
    return ItemRecord(id=item_id, name=f"{item_id}.mp3", order=order, **kwargs)


class TestDatabase:
    """Tests for the Database connection manager."""

    @pytest.mark.asyncio
    async def test_schema_is_created(self, in_memory_database):
        rows = await in_memory_database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        assert {"settings", "tracks"} <= {row["name"] for row in rows}

    @pytest.mark.asyncio
    async def test_memory_databases_are_isolated(self, in_memory_database):
        other = Database(":memory:")
        await other.initialize()
        try:
            await in_memory_database.execute(
                "INSERT INTO settings (key, value) VALUES (?, ?)", ("k", "v")
            )
            assert await other.fetch_one("SELECT * FROM settings WHERE key = 'k'") is None
        finally:
            await other.close()

    @pytest.mark.asyncio
    async def test_file_database_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "player.db"
        db = Database(f"sqlite:///{path}")
        await db.initialize()
        try:
            assert path.exists()
            assert db.is_memory is False
            assert db.path == str(path)
        finally:
            await db.close()

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, in_memory_database):
        with pytest.raises(RuntimeError):
            async with in_memory_database.transaction() as conn:
                await conn.execute("INSERT INTO settings (key, value) VALUES ('k', 'v')")
                raise RuntimeError("abort")

        assert await in_memory_database.fetch_one("SELECT * FROM settings") is None

    @pytest.mark.asyncio
    async def test_initialize_twice_keeps_data(self, in_memory_database):
        await in_memory_database.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?)", ("k", "v")
        )
        await in_memory_database.initialize()

        row = await in_memory_database.fetch_one("SELECT value FROM settings WHERE key = ?", ("k",))
        assert row == {"value": "v"}

    @pytest.mark.asyncio
    async def test_close_discards_memory_data(self):
        db = Database("sqlite:///:memory:")
        await db.initialize()
        await db.execute("INSERT INTO settings (key, value) VALUES (?, ?)", ("k", "v"))
        await db.close()

        await db.initialize()
        try:
            assert await db.fetch_all("SELECT * FROM settings") == []
        finally:
            await db.close()


class TestSQLiteItemRepository:
    """Tests for item persistence."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, item_repository):
        await item_repository.save(
            record("a", kind="audio/mpeg", duration=12.5, content=b"\x00\x01")
        )

        stored = await item_repository.get("a")
        assert stored == record("a", kind="audio/mpeg", duration=12.5, content=b"\x00\x01")

    @pytest.mark.asyncio
    async def test_get_missing(self, item_repository):
        assert await item_repository.get("missing") is None

    @pytest.mark.asyncio
    async def test_save_upserts(self, item_repository):
        await item_repository.save(record("a"))
        await item_repository.save(record("a", duration=30.0))

        items = await item_repository.get_all()
        assert len(items) == 1
        assert items[0].duration == 30.0

    @pytest.mark.asyncio
    async def test_get_all_orders_by_position(self, item_repository):
        await item_repository.save(record("c", order=2))
        await item_repository.save(record("a", order=0))
        await item_repository.save(record("b", order=1))

        assert [r.id for r in await item_repository.get_all()] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_save_order(self, item_repository):
        await item_repository.save(record("a", order=0, content=b"a"))
        await item_repository.save(record("b", order=1, content=b"b"))

        await item_repository.save_order([record("b", order=0), record("a", order=1)])

        items = await item_repository.get_all()
        assert [(r.id, r.order) for r in items] == [("b", 0), ("a", 1)]
        # only positions change
        assert items[1].content == b"a"

    @pytest.mark.asyncio
    async def test_delete(self, item_repository):
        await item_repository.save(record("a"))

        assert await item_repository.delete("a") is True
        assert await item_repository.delete("a") is False
        assert await item_repository.get_all() == []


class TestSQLiteSettingsRepository:
    """Tests for settings persistence."""

    @pytest.mark.asyncio
    async def test_load_without_saved_settings(self, settings_repository):
        assert await settings_repository.load() is None

    @pytest.mark.asyncio
    async def test_save_and_load(self, settings_repository):
        settings = PlayerSettings(mode="chunks", chunk_count=6, selected_item_id="a")

        await settings_repository.save(settings)

        assert await settings_repository.load() == settings

    @pytest.mark.asyncio
    async def test_stored_as_camel_case_json(self, settings_repository, in_memory_database):
        await settings_repository.save(PlayerSettings(chunk_repeats=3))

        row = await in_memory_database.fetch_one(
            "SELECT value FROM settings WHERE key = 'playerSettings'"
        )
        assert '"chunkRepeats":3' in row["value"]

    @pytest.mark.asyncio
    async def test_save_overwrites(self, settings_repository):
        await settings_repository.save(PlayerSettings(mode="gap"))
        await settings_repository.save(PlayerSettings(mode="half"))

        assert (await settings_repository.load()).mode == "half"

    @pytest.mark.asyncio
    async def test_corrupt_value_falls_back(self, settings_repository, in_memory_database, caplog):
        await in_memory_database.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?)", ("playerSettings", "{not json")
        )

        assert await settings_repository.load() is None
        assert "invalid" in caplog.text

    @pytest.mark.asyncio
    async def test_foreign_values_are_coerced(self, in_memory_database):
        await in_memory_database.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?)",
            ("legacy", '{"mode": "gap", "pauseSeconds": "abc", "unknownKey": 1}'),
        )

        loaded = await SQLiteSettingsRepository(in_memory_database, key="legacy").load()
        assert loaded.mode == "gap"
        assert loaded.pause_seconds == 2.0
