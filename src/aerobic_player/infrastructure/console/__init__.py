"""Console adapters - status output and keyboard transport controls."""

from aerobic_player.infrastructure.console.keyboard import KeyboardControls
from aerobic_player.infrastructure.console.status_sink import ConsoleStatusSink

__all__ = [
    "ConsoleStatusSink",
    "KeyboardControls",
]
