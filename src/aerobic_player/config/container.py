"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for all services, repositories and adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aerobic_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aerobic_player.application.interfaces.media_engine import MediaEngine
    from aerobic_player.application.services.library_service import LibraryService
    from aerobic_player.application.services.sequencer import PlaybackSequencer
    from aerobic_player.config.settings import Settings
    from aerobic_player.domain.playback.events import StatusBroadcaster
    from aerobic_player.domain.playback.repository import ItemRepository, SettingsRepository
    from aerobic_player.infrastructure.audio.content_handles import TempFileHandleFactory
    from aerobic_player.infrastructure.audio.ffprobe import FFprobeDurationProbe
    from aerobic_player.infrastructure.persistence.database import Database


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _item_repository: ItemRepository | None = None
    _settings_repository: SettingsRepository | None = None

    # Infrastructure adapters
    _handle_factory: TempFileHandleFactory | None = None
    _duration_probe: FFprobeDurationProbe | None = None
    _media_engine: MediaEngine | None = None

    # Application services
    _status_broadcaster: StatusBroadcaster | None = None
    _sequencer: PlaybackSequencer | None = None
    _library_service: LibraryService | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from aerobic_player.infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def item_repository(self) -> ItemRepository:
        """Get the playlist item repository."""
        if self._item_repository is None:
            from aerobic_player.infrastructure.persistence.repositories.item_repository import (
                SQLiteItemRepository,
            )

            self._item_repository = SQLiteItemRepository(self.database)
        return self._item_repository

    @property
    def settings_repository(self) -> SettingsRepository:
        """Get the player settings repository."""
        if self._settings_repository is None:
            from aerobic_player.infrastructure.persistence.repositories.settings_repository import (
                SQLiteSettingsRepository,
            )

            self._settings_repository = SQLiteSettingsRepository(self.database)
        return self._settings_repository

    # === Infrastructure Adapters ===

    @property
    def handle_factory(self) -> TempFileHandleFactory:
        """Get the temporary content handle factory."""
        if self._handle_factory is None:
            from aerobic_player.infrastructure.audio.content_handles import TempFileHandleFactory

            self._handle_factory = TempFileHandleFactory(self.settings.media.temp_dir)
        return self._handle_factory

    @property
    def duration_probe(self) -> FFprobeDurationProbe:
        """Get the ffprobe duration probe."""
        if self._duration_probe is None:
            from aerobic_player.infrastructure.audio.ffprobe import FFprobeDurationProbe

            self._duration_probe = FFprobeDurationProbe(
                self.handle_factory,
                ffprobe_path=self.settings.media.ffprobe_path,
                timeout=self.settings.media.probe_timeout_seconds,
            )
        return self._duration_probe

    @property
    def media_engine(self) -> MediaEngine:
        """Get the ffplay media engine."""
        if self._media_engine is None:
            from aerobic_player.infrastructure.audio.ffplay_engine import FFplayMediaEngine

            self._media_engine = FFplayMediaEngine(
                self.duration_probe,
                ffplay_path=self.settings.media.ffplay_path,
                tick_interval=self.settings.media.tick_interval_seconds,
            )
        return self._media_engine

    # === Application Services ===

    @property
    def status_broadcaster(self) -> StatusBroadcaster:
        """Get the status broadcaster shared by the sequencer and the library."""
        if self._status_broadcaster is None:
            from aerobic_player.domain.playback.events import StatusBroadcaster

            self._status_broadcaster = StatusBroadcaster()
        return self._status_broadcaster

    @property
    def sequencer(self) -> PlaybackSequencer:
        """Get the playback sequencer."""
        if self._sequencer is None:
            from aerobic_player.application.services.sequencer import PlaybackSequencer

            self._sequencer = PlaybackSequencer(
                self.media_engine,
                duration_probe=self.duration_probe,
                handle_factory=self.handle_factory,
                completion_epsilon=self.settings.playback.completion_epsilon,
                broadcaster=self.status_broadcaster,
            )
        return self._sequencer

    @property
    def library_service(self) -> LibraryService:
        """Get the library service."""
        if self._library_service is None:
            from aerobic_player.application.services.library_service import LibraryService

            self._library_service = LibraryService(
                item_repository=self.item_repository,
                settings_repository=self.settings_repository,
                sequencer=self.sequencer,
                duration_probe=self.duration_probe,
                broadcaster=self.status_broadcaster,
                save_delay=self.settings.playback.settings_save_delay_seconds,
            )
        return self._library_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources and restore the library."""
        await self.database.initialize()
        await self.library_service.restore()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._sequencer is not None:
            self._sequencer.stop()

        if self._library_service is not None:
            try:
                await self._library_service.close()
            except Exception as exc:
                logger.warning(LogTemplates.APP_SHUTDOWN_STEP_FAILED, "library service", exc)

        if self._media_engine is not None:
            await self._media_engine.close()

        if self._handle_factory is not None:
            self._handle_factory.revoke_all()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
