"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class PlaybackMode(StrEnum):
    """Scheduling modes the sequencer can run."""

    CONTINUOUS = "continuous"
    GAP = "gap"
    SINGLE = "single"
    HALF = "half"
    CHUNKS = "chunks"


class ConclusionReason(StrEnum):
    """Why a segment stopped executing."""

    COMPLETE = "complete"
    SKIP = "skip"
    STOP = "stop"


class SegmentKind(StrEnum):
    AUDIO = "audio"
    GAP = "gap"


@dataclass(frozen=True)
class ContentHandle:
    """Temporary addressable reference to an item's content.

    The media engine opens ``uri``; whoever created the handle is responsible
    for revoking it.
    """

    uri: str

    def __str__(self) -> str:
        return self.uri

    @property
    def path(self) -> Path:
        return Path(self.uri)


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp *value* into ``[minimum, maximum]``."""
    return max(minimum, min(maximum, value))
