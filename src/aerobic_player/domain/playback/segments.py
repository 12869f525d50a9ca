"""Segment descriptors produced by the plan generators."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from aerobic_player.domain.playback.value_objects import SegmentKind, clamp

if TYPE_CHECKING:
    from aerobic_player.domain.playback.items import PlaylistItem


@dataclass(frozen=True)
class AudioSegment:
    """A bounded playback window on one item.

    Chunk and repeat positions are 1-based and only set in chunks mode.
    """

    item: PlaylistItem
    start: float
    end: float
    note: str = ""
    chunk_index: int | None = None
    chunk_total: int | None = None
    repeat_index: int | None = None
    repeat_total: int | None = None

    kind = SegmentKind.AUDIO

    @property
    def length(self) -> float:
        return max(0.0, self.end - self.start)

    def clamped(self) -> AudioSegment:
        """Return a copy whose window lies within ``[0, item duration]``."""
        duration = self.item.playable_duration
        return replace(
            self,
            start=clamp(self.start, 0.0, duration),
            end=clamp(self.end, 0.0, duration),
        )

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class GapSegment:
    """A pure timed delay between audio segments."""

    seconds: float
    note: str = ""

    kind = SegmentKind.GAP


Segment = AudioSegment | GapSegment
