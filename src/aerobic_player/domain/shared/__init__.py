"""
Shared Domain Kernel

Contains exceptions, message templates and constrained types shared by the
playback domain and the outer layers.
"""

from aerobic_player.domain.shared.exceptions import (
    DomainError,
    EmptyPlaylistError,
    EnginePlaybackError,
    EngineStartError,
    MetadataError,
    NoContentError,
    NoDurationError,
    NoPlayableItemError,
    PlaybackError,
    UnknownModeError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "PlaybackError",
    "EmptyPlaylistError",
    "UnknownModeError",
    "NoPlayableItemError",
    "NoDurationError",
    "NoContentError",
    "EngineStartError",
    "EnginePlaybackError",
    "MetadataError",
]
