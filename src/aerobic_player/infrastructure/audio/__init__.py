"""Audio infrastructure - ffprobe probe, ffplay engine and temporary content files."""

from aerobic_player.infrastructure.audio.content_handles import TempFileHandleFactory
from aerobic_player.infrastructure.audio.ffplay_engine import FFplayMediaEngine
from aerobic_player.infrastructure.audio.ffprobe import FFprobeDurationProbe
from aerobic_player.infrastructure.audio.models import (
    FFplayConfig,
    FFprobeFormat,
    FFprobeOutput,
    PlayerState,
)

__all__ = [
    "FFplayConfig",
    "FFplayMediaEngine",
    "FFprobeDurationProbe",
    "FFprobeFormat",
    "FFprobeOutput",
    "PlayerState",
    "TempFileHandleFactory",
]
