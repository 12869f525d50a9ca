"""SQLite repository implementations."""

from aerobic_player.infrastructure.persistence.repositories.item_repository import (
    SQLiteItemRepository,
)
from aerobic_player.infrastructure.persistence.repositories.settings_repository import (
    SQLiteSettingsRepository,
)

__all__ = [
    "SQLiteItemRepository",
    "SQLiteSettingsRepository",
]
