"""
Playback Bounded Context

Domain logic for playlist items, mode configuration, segment planning and
status events.
"""

from aerobic_player.domain.playback.configuration import (
    ChunksConfig,
    ContinuousConfig,
    GapConfig,
    HalfConfig,
    ModeConfig,
    PlayerSettings,
    SingleConfig,
)
from aerobic_player.domain.playback.events import (
    GapStarted,
    ProgressUpdated,
    SegmentStarted,
    StateChanged,
    StatusBroadcaster,
    StatusEvent,
    StatusMessage,
    StatusSink,
)
from aerobic_player.domain.playback.items import ItemRecord, PlaylistItem
from aerobic_player.domain.playback.planning import plan_segments
from aerobic_player.domain.playback.repository import ItemRepository, SettingsRepository
from aerobic_player.domain.playback.segments import AudioSegment, GapSegment
from aerobic_player.domain.playback.value_objects import (
    ConclusionReason,
    ContentHandle,
    PlaybackMode,
)

__all__ = [
    # Entities
    "PlaylistItem",
    "ItemRecord",
    # Value Objects
    "PlaybackMode",
    "ConclusionReason",
    "ContentHandle",
    "AudioSegment",
    "GapSegment",
    # Configuration
    "ModeConfig",
    "ContinuousConfig",
    "GapConfig",
    "SingleConfig",
    "HalfConfig",
    "ChunksConfig",
    "PlayerSettings",
    # Events
    "StatusEvent",
    "StateChanged",
    "SegmentStarted",
    "ProgressUpdated",
    "GapStarted",
    "StatusMessage",
    "StatusSink",
    "StatusBroadcaster",
    # Repository
    "ItemRepository",
    "SettingsRepository",
    # Planning
    "plan_segments",
]
