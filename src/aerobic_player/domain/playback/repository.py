"""
Playback Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from aerobic_player.domain.playback.configuration import PlayerSettings
from aerobic_player.domain.playback.items import ItemRecord


class ItemRepository(ABC):
    """Abstract repository for playlist item records, including their content."""

    @abstractmethod
    async def get_all(self) -> list[ItemRecord]:
        """Get every stored item.

        Returns:
            Records sorted by their order, lowest first.
        """
        ...

    @abstractmethod
    async def save(self, record: ItemRecord) -> None:
        """Insert or replace an item record.

        Args:
            record: The record to save.
        """
        ...

    @abstractmethod
    async def delete(self, item_id: str) -> bool:
        """Delete an item by ID.

        Args:
            item_id: The item ID.

        Returns:
            True if the item was deleted, False if it didn't exist.
        """
        ...

    @abstractmethod
    async def save_order(self, records: list[ItemRecord]) -> None:
        """Persist the order of every given record in one transaction."""
        ...


class SettingsRepository(ABC):
    """Abstract repository for the persisted player settings."""

    @abstractmethod
    async def load(self) -> PlayerSettings | None:
        """Load the stored settings.

        Returns:
            The settings if present and readable, None otherwise.
        """
        ...

    @abstractmethod
    async def save(self, settings: PlayerSettings) -> None:
        """Replace the stored settings."""
        ...
