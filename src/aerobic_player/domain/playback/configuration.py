"""Per-run mode configuration and the persisted player settings.

Each playback mode has its own frozen configuration model; ``ModeConfig`` is
the tagged union over them, discriminated by ``mode``. ``PlayerSettings`` is
the flat, user-editable object that is persisted between sessions and turned
into a ``ModeConfig`` when a run starts.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from aerobic_player.domain.playback.value_objects import PlaybackMode
from aerobic_player.domain.shared.constants import PlaybackDefaults
from aerobic_player.domain.shared.exceptions import UnknownModeError, ValidationError
from aerobic_player.domain.shared.messages import ErrorMessages
from aerobic_player.domain.shared.types import ChunkCount, NonEmptyStr, RepeatCount, Seconds


class _ModeConfigBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ContinuousConfig(_ModeConfigBase):
    mode: Literal[PlaybackMode.CONTINUOUS] = PlaybackMode.CONTINUOUS


class GapConfig(_ModeConfigBase):
    mode: Literal[PlaybackMode.GAP] = PlaybackMode.GAP
    pause_seconds: Seconds = PlaybackDefaults.PAUSE_SECONDS


class SingleConfig(_ModeConfigBase):
    mode: Literal[PlaybackMode.SINGLE] = PlaybackMode.SINGLE
    selected_item_id: NonEmptyStr | None = None


class HalfConfig(_ModeConfigBase):
    mode: Literal[PlaybackMode.HALF] = PlaybackMode.HALF
    selected_item_id: NonEmptyStr | None = None
    half_buffer_seconds: Seconds = PlaybackDefaults.HALF_BUFFER_SECONDS


class ChunksConfig(_ModeConfigBase):
    mode: Literal[PlaybackMode.CHUNKS] = PlaybackMode.CHUNKS
    chunk_count: ChunkCount = PlaybackDefaults.CHUNK_COUNT
    chunk_repeats: RepeatCount = PlaybackDefaults.CHUNK_REPEATS
    chunk_lead_buffer: Seconds = PlaybackDefaults.CHUNK_LEAD_BUFFER
    chunk_tail_buffer: Seconds = PlaybackDefaults.CHUNK_TAIL_BUFFER


ModeConfig = Annotated[
    ContinuousConfig | GapConfig | SingleConfig | HalfConfig | ChunksConfig,
    Field(discriminator="mode"),
]
"""Tagged union of all per-mode configurations."""

MODE_CONFIG_TYPES: tuple[type[_ModeConfigBase], ...] = (
    ContinuousConfig,
    GapConfig,
    SingleConfig,
    HalfConfig,
    ChunksConfig,
)


# (minimum, integer) for every numeric settings field
_NUMERIC_BOUNDS: dict[str, tuple[float, bool]] = {
    "pause_seconds": (0.0, False),
    "half_buffer_seconds": (0.0, False),
    "chunk_count": (2, True),
    "chunk_repeats": (1, True),
    "chunk_lead_buffer": (0.0, False),
    "chunk_tail_buffer": (0.0, False),
}


class PlayerSettings(BaseModel):
    """User-editable player settings.

    Numeric values are coerced the way a form input would be: unparseable or
    non-finite input falls back to the field default, and values below the
    field minimum are raised to it. ``mode`` is kept as a plain string so that
    a stale stored value surfaces as ``UnknownModeError`` when a run starts.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    mode: str = PlaybackDefaults.MODE
    pause_seconds: float = PlaybackDefaults.PAUSE_SECONDS
    selected_item_id: str | None = None
    half_buffer_seconds: float = PlaybackDefaults.HALF_BUFFER_SECONDS
    chunk_count: int = PlaybackDefaults.CHUNK_COUNT
    chunk_repeats: int = PlaybackDefaults.CHUNK_REPEATS
    chunk_lead_buffer: float = PlaybackDefaults.CHUNK_LEAD_BUFFER
    chunk_tail_buffer: float = PlaybackDefaults.CHUNK_TAIL_BUFFER

    @field_validator(*_NUMERIC_BOUNDS, mode="before")
    @classmethod
    def _coerce_number(cls, v: Any, info: ValidationInfo) -> float | int:
        assert info.field_name is not None
        default = cls.model_fields[info.field_name].default
        minimum, integer = _NUMERIC_BOUNDS[info.field_name]

        try:
            number = float(v)
        except (TypeError, ValueError):
            number = float(default)
        if not math.isfinite(number):
            number = float(default)
        if integer:
            number = math.trunc(number)
        number = max(minimum, number)
        return int(number) if integer else number

    @field_validator("selected_item_id", mode="before")
    @classmethod
    def _empty_selection_to_none(cls, v: Any) -> str | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return str(v)

    def to_mode_config(self) -> ModeConfig:
        """Build the typed configuration for the selected mode."""
        match self.mode:
            case PlaybackMode.CONTINUOUS:
                return ContinuousConfig()
            case PlaybackMode.GAP:
                return GapConfig(pause_seconds=self.pause_seconds)
            case PlaybackMode.SINGLE:
                return SingleConfig(selected_item_id=self.selected_item_id)
            case PlaybackMode.HALF:
                return HalfConfig(
                    selected_item_id=self.selected_item_id,
                    half_buffer_seconds=self.half_buffer_seconds,
                )
            case PlaybackMode.CHUNKS:
                return ChunksConfig(
                    chunk_count=self.chunk_count,
                    chunk_repeats=self.chunk_repeats,
                    chunk_lead_buffer=self.chunk_lead_buffer,
                    chunk_tail_buffer=self.chunk_tail_buffer,
                )
            case _:
                raise UnknownModeError(self.mode)

    def with_changes(self, **changes: Any) -> PlayerSettings:
        """Return a validated copy with *changes* applied."""
        for key in changes:
            if key not in type(self).model_fields:
                raise ValidationError(ErrorMessages.INVALID_SETTING.format(key=key), field=key)
        return type(self).model_validate({**self.model_dump(), **changes})


PlaybackConfig = (
    ContinuousConfig | GapConfig | SingleConfig | HalfConfig | ChunksConfig | PlayerSettings
)
"""Anything ``PlaybackSequencer.play`` accepts as run configuration."""


def resolve_mode_config(config: object) -> ModeConfig:
    """Read *config* once and return the typed configuration for the run."""
    if isinstance(config, PlayerSettings):
        return config.to_mode_config()
    if isinstance(config, MODE_CONFIG_TYPES):
        return config  # type: ignore[return-value]
    raise UnknownModeError(getattr(config, "mode", config))
