"""SQLite implementation of the player settings repository."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from aerobic_player.domain.playback.configuration import PlayerSettings
from aerobic_player.domain.playback.repository import SettingsRepository
from aerobic_player.domain.shared.constants import DatabaseTables, SettingsKeys
from aerobic_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from aerobic_player.infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)


class SQLiteSettingsRepository(SettingsRepository):
    """Stores the settings as one JSON object under a fixed key."""

    def __init__(self, database: Database, key: str = SettingsKeys.PLAYER_SETTINGS) -> None:
        self._db = database
        self._key = key

    async def load(self) -> PlayerSettings | None:
        row = await self._db.fetch_one(
            f"SELECT value FROM {DatabaseTables.SETTINGS} WHERE key = ?",
            (self._key,),
        )
        if row is None:
            return None

        try:
            return PlayerSettings.model_validate(json.loads(row["value"]))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(LogTemplates.SETTINGS_INVALID, e)
            return None

    async def save(self, settings: PlayerSettings) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.SETTINGS} (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (self._key, settings.model_dump_json(by_alias=True)),
        )
        logger.debug(LogTemplates.SETTINGS_SAVED)
