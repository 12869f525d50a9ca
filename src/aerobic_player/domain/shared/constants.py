"""Centralized constants for database schema, settings keys, and playback defaults.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class DatabaseTables:
    """Database table names."""

    TRACKS = "tracks"
    SETTINGS = "settings"


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class SettingsKeys:
    """Keys of the opaque settings objects kept in the settings table."""

    PLAYER_SETTINGS = "playerSettings"


class PlaybackDefaults:
    """Default values of the user-editable player settings."""

    MODE = "continuous"
    PAUSE_SECONDS = 2.0
    HALF_BUFFER_SECONDS = 5.0
    CHUNK_COUNT = 3
    CHUNK_REPEATS = 1
    CHUNK_LEAD_BUFFER = 5.0
    CHUNK_TAIL_BUFFER = 5.0

    # Distance from a segment's end at which a position update counts as completion.
    COMPLETION_EPSILON = 0.05
    SEEK_STEP_SECONDS = 5.0
    SETTINGS_SAVE_DELAY_SECONDS = 0.2


class MediaDefaults:
    """Defaults for the ffmpeg based media adapters."""

    FFPLAY_PATH = "ffplay"
    FFPROBE_PATH = "ffprobe"
    PROBE_TIMEOUT_SECONDS = 10.0
    TICK_INTERVAL_SECONDS = 0.25
    TEMP_FILE_PREFIX = "aerobic-player-"
    FALLBACK_SUFFIX = ".audio"


class LogLevels:
    """Valid logging level names."""

    ALL = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
