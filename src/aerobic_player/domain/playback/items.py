"""Playlist items and their persisted record shape."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, PrivateAttr

from aerobic_player.domain.playback.value_objects import ContentHandle
from aerobic_player.domain.shared.exceptions import NoContentError
from aerobic_player.domain.shared.messages import LogTemplates
from aerobic_player.domain.shared.types import ItemNameStr, ItemOrder, NonEmptyStr, Seconds

if TYPE_CHECKING:
    from aerobic_player.application.interfaces.content import ContentHandleFactory, DurationProbe

logger = logging.getLogger(__name__)


class ItemRecord(BaseModel):
    """Persisted representation of a playlist item."""

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr
    name: ItemNameStr
    kind: str = ""
    order: ItemOrder = 0
    duration: Seconds | None = None
    content: bytes | None = None


class PlaylistItem(BaseModel):
    """One playable asset in the ordered playlist.

    The item exclusively owns its content blob. A temporary content handle is
    created on first use, cached, and revoked whenever the content changes or
    the item is discarded, so at most one handle is live at a time.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: NonEmptyStr
    name: ItemNameStr
    kind: str = ""
    order: ItemOrder = 0
    duration: Seconds | None = None

    _content: bytes | None = PrivateAttr(default=None)
    _handle: ContentHandle | None = PrivateAttr(default=None)
    _handle_factory: ContentHandleFactory | None = PrivateAttr(default=None)

    @classmethod
    def from_record(cls, record: ItemRecord) -> PlaylistItem:
        item = cls(
            id=record.id,
            name=record.name,
            kind=record.kind,
            order=record.order,
            duration=record.duration,
        )
        item._content = record.content
        return item

    def to_record(self) -> ItemRecord:
        return ItemRecord(
            id=self.id,
            name=self.name,
            kind=self.kind,
            order=self.order,
            duration=self.duration,
            content=self._content,
        )

    @property
    def content(self) -> bytes | None:
        return self._content

    @property
    def has_content(self) -> bool:
        return self._content is not None

    @property
    def playable_duration(self) -> float:
        """Resolved duration, or 0 while unknown."""
        return self.duration or 0.0

    def set_content(self, content: bytes | None) -> None:
        """Replace the owned content, invalidating any issued handle."""
        self._content = content
        self.revoke_content_handle()

    async def resolve_duration(self, probe: DurationProbe) -> float:
        """Return the item's duration, probing the content once if needed.

        Probe failures are never raised: the duration degrades to 0, which
        marks the item as unplayable for the planners.
        """
        if self.duration is not None and self.duration > 0:
            return self.duration
        if self._content is None:
            return 0.0

        try:
            duration = await probe.probe(self._content, self.kind or None)
        except Exception as e:
            logger.warning(LogTemplates.ITEM_DURATION_FAILED, self.id, e)
            duration = 0.0

        if not math.isfinite(duration) or duration < 0:
            duration = 0.0
        self.duration = duration
        logger.debug(LogTemplates.ITEM_DURATION_RESOLVED, self.id, duration)
        return duration

    def content_handle(self, factory: ContentHandleFactory) -> ContentHandle:
        """Return the cached content handle, creating it on first use."""
        if self._content is None:
            raise NoContentError(self.id)
        if self._handle is None:
            self._handle = factory.create(self._content, self.kind or None)
            self._handle_factory = factory
            logger.debug(LogTemplates.ITEM_HANDLE_CREATED, self.id, self._handle)
        return self._handle

    def revoke_content_handle(self) -> None:
        if self._handle is None:
            return
        if self._handle_factory is not None:
            self._handle_factory.revoke(self._handle)
        logger.debug(LogTemplates.ITEM_HANDLE_REVOKED, self.id)
        self._handle = None
        self._handle_factory = None

    def discard(self) -> None:
        """Release every resource the item holds outside the process."""
        self.revoke_content_handle()
