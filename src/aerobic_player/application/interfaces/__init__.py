"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from aerobic_player.application.interfaces.content import ContentHandleFactory, DurationProbe
from aerobic_player.application.interfaces.media_engine import MediaEngine, MediaEvent

__all__ = [
    "MediaEngine",
    "MediaEvent",
    "DurationProbe",
    "ContentHandleFactory",
]
