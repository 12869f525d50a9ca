"""Base exception classes for domain-level errors."""

from __future__ import annotations

from aerobic_player.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


# === Playback Errors ===


class PlaybackError(DomainError):
    """Base class for errors raised while sequencing playback."""


class EmptyPlaylistError(PlaybackError):
    """Raised when playback is requested without any items."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.EMPTY_PLAYLIST, code="EMPTY_PLAYLIST")


class UnknownModeError(PlaybackError):
    """Raised when the configured playback mode is not recognized."""

    def __init__(self, mode: object, message: str | None = None) -> None:
        super().__init__(
            message or ErrorMessages.UNKNOWN_MODE.format(mode=mode), code="UNKNOWN_MODE"
        )
        self.mode = mode


class NoPlayableItemError(PlaybackError):
    """Raised when single/half mode has no item to focus on."""

    def __init__(self, mode: str, message: str | None = None) -> None:
        super().__init__(
            message or ErrorMessages.NO_PLAYABLE_ITEM.format(mode=mode), code="NO_PLAYABLE_ITEM"
        )
        self.mode = mode


class NoDurationError(PlaybackError):
    """Raised when the focus item has no usable duration."""

    def __init__(self, item_id: str, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NO_DURATION, code="NO_DURATION")
        self.item_id = item_id


class NoContentError(PlaybackError):
    """Raised when a content handle is requested for an item without content."""

    def __init__(self, item_id: str, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.NO_CONTENT, code="NO_CONTENT")
        self.item_id = item_id


class EngineStartError(PlaybackError):
    """Raised when the media engine rejects a play request."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.ENGINE_START_FAILED, code="ENGINE_START_FAILED")


class MetadataError(PlaybackError):
    """Raised when metadata cannot be read for a media source."""

    def __init__(self, source: str | None = None, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.METADATA_FAILED, code="METADATA_FAILED")
        self.source = source


class EnginePlaybackError(PlaybackError):
    """Raised when the media engine reports an error while a segment plays."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.ENGINE_PLAYBACK_FAILED, code="ENGINE_PLAYBACK_FAILED")
