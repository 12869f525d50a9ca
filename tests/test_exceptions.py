"""Tests for the domain exception hierarchy."""

import pytest

from aerobic_player.domain.shared import (
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
from aerobic_player.domain.shared.messages import ErrorMessages


class TestDomainError:
    def test_code_defaults_to_class_name(self):
        error = DomainError("boom")

        assert error.message == "boom"
        assert error.code == "DomainError"
        assert str(error) == "boom"

    def test_validation_error_keeps_field(self):
        error = ValidationError("bad value", field="gap_seconds")

        assert error.code == "VALIDATION_ERROR"
        assert error.field == "gap_seconds"
        assert isinstance(error, DomainError)


class TestPlaybackErrors:
    """Every playback error carries a stable code and a default message."""

    @pytest.mark.parametrize(
        ("error", "code", "message"),
        [
            (EmptyPlaylistError(), "EMPTY_PLAYLIST", ErrorMessages.EMPTY_PLAYLIST),
            (UnknownModeError("shuffle"), "UNKNOWN_MODE", "Unknown playback mode: shuffle"),
            (NoPlayableItemError("half"), "NO_PLAYABLE_ITEM", "No item available for half mode."),
            (NoDurationError("a"), "NO_DURATION", ErrorMessages.NO_DURATION),
            (NoContentError("a"), "NO_CONTENT", ErrorMessages.NO_CONTENT),
            (EngineStartError(), "ENGINE_START_FAILED", ErrorMessages.ENGINE_START_FAILED),
            (MetadataError("mem://1"), "METADATA_FAILED", ErrorMessages.METADATA_FAILED),
            (EnginePlaybackError(), "ENGINE_PLAYBACK_FAILED", ErrorMessages.ENGINE_PLAYBACK_FAILED),
        ],
    )
    def test_codes_and_default_messages(self, error: PlaybackError, code: str, message: str):
        assert isinstance(error, PlaybackError)
        assert error.code == code
        assert error.message == message

    def test_custom_message_overrides_default(self):
        error = EnginePlaybackError("decoder crashed")

        assert error.message == "decoder crashed"
        assert error.code == "ENGINE_PLAYBACK_FAILED"

    def test_context_attributes(self):
        assert UnknownModeError("shuffle").mode == "shuffle"
        assert NoDurationError("item-1").item_id == "item-1"
        assert NoContentError("item-2").item_id == "item-2"
        assert MetadataError("mem://3").source == "mem://3"
