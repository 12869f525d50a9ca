"""Pydantic models for ffprobe output and ffplay process configuration.

These are infrastructure-specific models for parsing external ffprobe data
and building ffplay command lines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aerobic_player.domain.shared.types import NonNegativeFloat

# ── Pydantic models for ffprobe data ───────────────────────────────────


class FFprobeFormat(BaseModel):
    """The ``format`` section of ``ffprobe -show_format`` JSON output."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    duration: NonNegativeFloat | None = None
    format_name: str | None = None

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> float | None:
        """ffprobe reports ``"N/A"`` or omits the key when it cannot tell."""
        if v is None:
            return None
        try:
            number = float(v)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) and number >= 0 else None


class FFprobeOutput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    format: FFprobeFormat = Field(default_factory=FFprobeFormat)


# ── ffplay configuration ───────────────────────────────────────────────


class PlayerState(Enum):
    """States for the ffplay media engine."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass
class FFplayConfig:
    """Configuration for the ffplay output process."""

    disable_display: bool = True
    auto_exit: bool = True
    log_level: str = "error"
    volume: int | None = None

    def get_options(self) -> list[str]:
        """Get ffplay options preceding the seek position."""
        opts: list[str] = []
        if self.disable_display:
            opts.append("-nodisp")
        if self.auto_exit:
            opts.append("-autoexit")
        if self.log_level:
            opts.extend(["-loglevel", self.log_level])
        if self.volume is not None:
            opts.extend(["-volume", str(max(0, min(100, self.volume)))])
        return opts

    def build_args(self, executable: str, source: str, position: float) -> list[str]:
        """Build the full argument vector to play *source* from *position*."""
        return [executable, *self.get_options(), "-ss", f"{max(0.0, position):.3f}", source]
