"""Port interfaces for item content: duration probing and temporary handles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aerobic_player.domain.playback.value_objects import ContentHandle


class DurationProbe(ABC):
    """Reads the playable length of a raw media blob."""

    @abstractmethod
    async def probe(self, content: bytes, kind: str | None = None) -> float:
        """Return the duration of *content* in seconds.

        Raises:
            MetadataError: If the content has no readable duration.
        """
        ...


class ContentHandleFactory(ABC):
    """Creates and revokes temporary addressable handles for content."""

    @abstractmethod
    def create(self, content: bytes, kind: str | None = None) -> "ContentHandle":
        """Expose *content* under a new handle."""
        ...

    @abstractmethod
    def revoke(self, handle: "ContentHandle") -> None:
        """Release a handle created by this factory. Unknown handles are ignored."""
        ...
