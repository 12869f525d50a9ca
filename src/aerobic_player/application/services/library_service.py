"""Library Application Service - owns the ordered item list and player settings."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from aerobic_player.domain.playback.configuration import PlayerSettings
from aerobic_player.domain.playback.events import (
    CallbackStatusSink,
    SegmentStarted,
    StateChanged,
    StatusBroadcaster,
    StatusEvent,
    StatusMessage,
)
from aerobic_player.domain.playback.items import PlaylistItem
from aerobic_player.domain.shared.constants import PlaybackDefaults
from aerobic_player.domain.shared.exceptions import DomainError
from aerobic_player.domain.shared.messages import LogTemplates, StatusNotes

if TYPE_CHECKING:
    from aerobic_player.application.interfaces.content import DurationProbe
    from aerobic_player.application.services.sequencer import PlaybackSequencer
    from aerobic_player.domain.playback.repository import ItemRepository, SettingsRepository

logger = logging.getLogger(__name__)


class LibraryService:
    """Keeps the playlist and settings in memory and in sync with the store.

    Item order is always ``0..n-1`` in list order. Settings changes are saved
    after a short quiet period so a burst of edits results in a single write.
    """

    def __init__(
        self,
        *,
        item_repository: ItemRepository,
        settings_repository: SettingsRepository,
        sequencer: PlaybackSequencer,
        duration_probe: DurationProbe,
        broadcaster: StatusBroadcaster,
        save_delay: float = PlaybackDefaults.SETTINGS_SAVE_DELAY_SECONDS,
    ) -> None:
        self._item_repo = item_repository
        self._settings_repo = settings_repository
        self._sequencer = sequencer
        self._probe = duration_probe
        self._broadcaster = broadcaster
        self._save_delay = save_delay

        self._items: list[PlaylistItem] = []
        self._settings = PlayerSettings()
        self._current_item_id: str | None = None

        self._save_handle: asyncio.TimerHandle | None = None
        self._save_tasks: set[asyncio.Task[None]] = set()

        self._tracker = CallbackStatusSink(self._track_current_item)
        self._broadcaster.subscribe(self._tracker)

    # === State ===

    @property
    def items(self) -> tuple[PlaylistItem, ...]:
        return tuple(self._items)

    @property
    def settings(self) -> PlayerSettings:
        return self._settings

    @property
    def current_item_id(self) -> str | None:
        """ID of the item whose segment is playing, if any."""
        return self._current_item_id

    @property
    def has_pending_settings_save(self) -> bool:
        return self._save_handle is not None or bool(self._save_tasks)

    def get_item(self, item_id: str) -> PlaylistItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    def _track_current_item(self, event: StatusEvent) -> None:
        if isinstance(event, SegmentStarted):
            self._current_item_id = event.item_id
        elif isinstance(event, StateChanged) and not event.is_playing:
            self._current_item_id = None

    def _notify(self, note: str) -> None:
        self._broadcaster.publish(StatusMessage(mode=self._settings.mode, note=note))

    # === Library ===

    async def restore(self) -> None:
        """Load settings and items from the store."""
        stored = await self._settings_repo.load()
        self._settings = stored or PlayerSettings()

        records = await self._item_repo.get_all()
        self._items = [PlaylistItem.from_record(record) for record in records]
        self._renumber()

        if self._items and not self._settings.selected_item_id:
            self._settings = self._settings.with_changes(selected_item_id=self._items[0].id)
            self._queue_settings_save()

        logger.info(LogTemplates.LIBRARY_RESTORED, len(self._items), self._settings.mode)

    async def add_item(self, name: str, kind: str, content: bytes) -> PlaylistItem:
        """Append a new item, probing its duration first.

        A failed probe stores a duration of 0; such items are skipped by the
        planners but stay in the list.
        """
        item = PlaylistItem(id=str(uuid4()), name=name, kind=kind, order=len(self._items))
        item.set_content(content)
        await item.resolve_duration(self._probe)

        await self._item_repo.save(item.to_record())
        self._items.append(item)
        logger.info(LogTemplates.LIBRARY_ITEM_ADDED, item.name, item.playable_duration)

        if not self._settings.selected_item_id:
            self._settings = self._settings.with_changes(selected_item_id=self._items[0].id)
        self._queue_settings_save()
        return item

    async def add_file(self, path: str | Path) -> PlaylistItem:
        """Read a local file and add it as an item named after the file."""
        path = Path(path)
        content = await asyncio.to_thread(path.read_bytes)
        kind, _ = mimetypes.guess_type(path.name)
        return await self.add_item(path.name, kind or "", content)

    async def move_item(self, item_id: str, direction: int) -> bool:
        """Move an item by *direction* places. Returns False if nothing moved."""
        index = next((i for i, item in enumerate(self._items) if item.id == item_id), None)
        if index is None:
            return False
        new_index = index + direction
        if new_index < 0 or new_index >= len(self._items):
            return False

        item = self._items.pop(index)
        self._items.insert(new_index, item)
        self._renumber()
        await self._item_repo.save_order([i.to_record() for i in self._items])
        logger.info(LogTemplates.LIBRARY_ITEM_MOVED, item_id, index, new_index)
        return True

    async def remove_item(self, item_id: str) -> bool:
        """Remove an item, stopping playback if it is the one playing."""
        index = next((i for i, item in enumerate(self._items) if item.id == item_id), None)
        if index is None:
            return False

        removed = self._items.pop(index)
        if self._current_item_id == item_id:
            self._current_item_id = None
            self._sequencer.stop()
        removed.discard()

        await self._item_repo.delete(item_id)
        self._renumber()
        await self._item_repo.save_order([i.to_record() for i in self._items])

        if self._settings.selected_item_id == item_id:
            next_id = self._items[0].id if self._items else None
            self._settings = self._settings.with_changes(selected_item_id=next_id)
            self._queue_settings_save()

        logger.info(LogTemplates.LIBRARY_ITEM_REMOVED, item_id)
        return True

    def _renumber(self) -> None:
        for index, item in enumerate(self._items):
            item.order = index

    # === Settings ===

    def update_settings(self, **changes: Any) -> PlayerSettings:
        """Apply and validate *changes*, then schedule a save.

        Raises:
            ValidationError: If a key is not a settings field.
        """
        self._settings = self._settings.with_changes(**changes)
        self._queue_settings_save()
        return self._settings

    def select_item(self, item_id: str | None) -> PlayerSettings:
        return self.update_settings(selected_item_id=item_id)

    def _queue_settings_save(self) -> None:
        if self._save_handle is not None:
            self._save_handle.cancel()
        self._save_handle = asyncio.get_running_loop().call_later(
            self._save_delay, self._start_settings_save
        )

    def _start_settings_save(self) -> None:
        self._save_handle = None
        task = asyncio.get_running_loop().create_task(self._save_settings())
        self._save_tasks.add(task)
        task.add_done_callback(self._save_tasks.discard)

    async def _save_settings(self) -> None:
        try:
            await self._settings_repo.save(self._settings)
        except Exception:
            logger.exception(LogTemplates.LIBRARY_SETTINGS_SAVE_FAILED)

    async def flush_settings(self) -> None:
        """Save a pending settings change now instead of after the delay."""
        if self._save_handle is not None:
            self._save_handle.cancel()
            self._save_handle = None
            await self._save_settings()
        if self._save_tasks:
            await asyncio.gather(*self._save_tasks)

    # === Playback ===

    async def start_playback(self) -> bool:
        """Play the whole list with the current settings.

        Domain errors end the run and are reported as a status message.
        Returns True if the run ended without an error.
        """
        if self._sequencer.playing:
            return False
        if not self._items:
            self._notify(StatusNotes.ADD_ITEMS_FIRST)
            return False

        try:
            await self._sequencer.play(list(self._items), self._settings)
        except DomainError as e:
            self._notify(e.message)
            return False
        return True

    async def play_pause(self) -> None:
        """Start playback when idle, otherwise toggle pause."""
        if not self._sequencer.playing:
            await self.start_playback()
            return
        await self._sequencer.toggle_pause()

    def stop_playback(self) -> None:
        self._sequencer.stop()
        self._notify(StatusNotes.STOPPED)

    async def close(self) -> None:
        """Flush pending settings and release every item's content handle."""
        await self.flush_settings()
        for item in self._items:
            item.discard()
        self._broadcaster.unsubscribe(self._tracker)
