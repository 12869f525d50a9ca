"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite repositories)
- Audio (ffprobe duration probe, ffplay media engine, temporary content files)
- Console (status output and keyboard controls)
"""

from aerobic_player.infrastructure.audio.ffplay_engine import FFplayMediaEngine
from aerobic_player.infrastructure.persistence.database import Database

__all__ = [
    "FFplayMediaEngine",
    "Database",
]
