"""Centralized message constants for error messages, log templates, and status notes."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Playback Errors
    EMPTY_PLAYLIST = "No items available for playback."
    UNKNOWN_MODE = "Unknown playback mode: {mode}"
    NO_PLAYABLE_ITEM = "No item available for {mode} mode."
    NO_DURATION = "Could not determine a playback duration."
    NO_CONTENT = "No audio content available for this item."
    ENGINE_START_FAILED = "Audio playback could not be started."
    ENGINE_PLAYBACK_FAILED = "Audio playback failed."
    METADATA_FAILED = "Metadata could not be loaded."

    # Library Errors
    ITEM_NOT_FOUND = "Item '{item_id}' not found"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_SETTING = "Unknown setting: {key}"
    INVALID_SETTING_ASSIGNMENT = "Expected KEY=VALUE, got '{value}'"

    # Probe Errors
    PROBE_EMPTY_OUTPUT = "ffprobe returned no duration"
    PROBE_TIMEOUT = "ffprobe timed out after {timeout}s"
    PROBE_EXIT_CODE = "ffprobe exited with code {code}"


class StatusNotes:
    """Human readable notes carried by status events."""

    FINISHED = "Finished."
    STOPPED = "Stopped."
    ADD_ITEMS_FIRST = "Add items before starting playback."

    CONTINUOUS = "Continuous playback"
    PLAYING = "Playing"
    PAUSE_AFTER = "Pause {seconds:g}s afterwards"
    GAP = "Pause {seconds:g}s"
    SINGLE_LOOP = "Repeats until stopped."
    HALF_FIRST = "Until half + {seconds:g}s"
    HALF_FULL = "Full track"
    CHUNK = "Chunk {chunk_index}/{chunk_total} · Repeat {repeat_index}/{repeat_total}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting Aerobic Player (environment: {environment})"
    APP_STOPPED = "Aerobic Player stopped"
    APP_KEYBOARD_INTERRUPT = "Received keyboard interrupt"
    APP_FATAL_ERROR = "Fatal error: %s"
    APP_LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    APP_SHUTDOWN_STEP_FAILED = "Failed closing %s: %r"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database closed"

    # Repository Operations
    ITEM_SAVED = "Saved item %s at position %s"
    ITEM_DELETED = "Deleted item %s"
    ITEM_ORDER_SAVED = "Persisted order for %d items"
    SETTINGS_SAVED = "Saved player settings"
    SETTINGS_INVALID = "Stored player settings are invalid, using defaults: %s"

    # Library Operations
    LIBRARY_RESTORED = "Restored %d items (mode: %s)"
    LIBRARY_ITEM_ADDED = "Added item '%s' (%.2fs)"
    LIBRARY_ITEM_MOVED = "Moved item %s from %d to %d"
    LIBRARY_ITEM_REMOVED = "Removed item %s"
    LIBRARY_SETTINGS_SAVE_FAILED = "Saving player settings failed"

    # Item Operations
    ITEM_DURATION_RESOLVED = "Resolved duration for %s: %.3fs"
    ITEM_DURATION_FAILED = "Duration probe failed for %s: %s"
    ITEM_HANDLE_CREATED = "Created content handle for %s: %s"
    ITEM_HANDLE_REVOKED = "Revoked content handle for %s"

    # Sequencer Operations
    SEQUENCER_ALREADY_PLAYING = "play() called while already running, ignoring"
    SEQUENCER_RUN_STARTED = "Playback run started: mode=%s items=%d"
    SEQUENCER_RUN_FINISHED = "Playback run finished: mode=%s stopped=%s"
    SEQUENCER_RUN_FAILED = "Playback run aborted: %s"
    SEQUENCER_SEGMENT_STARTED = "Segment started: %s [%.2f, %.2f] %s"
    SEQUENCER_SEGMENT_EMPTY = "Skipping empty segment for %s [%.2f, %.2f]"
    SEQUENCER_SEGMENT_CONCLUDED = "Segment concluded: %s (%s)"
    SEQUENCER_GAP_STARTED = "Gap started: %.2fs"
    SEQUENCER_ENGINE_START_FAILED = "Audio could not be started: %r"
    SEQUENCER_ENGINE_START_SUPPRESSED = "Ignoring play rejection after stop: %r"
    SEQUENCER_ENGINE_ERROR = "Media engine reported an error during playback: %r"
    SEQUENCER_RESUME_FAILED = "Playback could not be resumed: %r"
    SEQUENCER_PAUSED = "Playback paused"
    SEQUENCER_RESUMED = "Playback resumed"
    SEQUENCER_SEEK = "Seek to %.2fs"
    SEQUENCER_SKIP = "Skip requested (paused=%s)"
    SEQUENCER_STOP = "Stop requested"

    # Status Broadcasting
    STATUS_SINK_SUBSCRIBED = "Subscribed status sink %s"
    STATUS_SINK_UNSUBSCRIBED = "Unsubscribed status sink %s"
    STATUS_SINK_ERROR = "Error in status sink %s for %s event"
    STATUS_EVENT_RECEIVED = "Status event: %s"

    # Console Controls
    KEYBOARD_UNAVAILABLE = "Keyboard controls unavailable: %r"

    # Media Engine
    ENGINE_LOADING = "Loading media source %s"
    ENGINE_METADATA_READY = "Metadata ready for %s (duration %.2fs)"
    ENGINE_METADATA_FAILED = "Metadata failed for %s: %r"
    ENGINE_PROCESS_STARTED = "Started ffplay (pid %s) at %.2fs"
    ENGINE_PROCESS_ENDED = "ffplay exited with code %s"
    ENGINE_PROCESS_TERMINATE_FAILED = "Failed to terminate ffplay: %r"
    ENGINE_LISTENER_ERROR = "Error in media listener for %s event"
    ENGINE_CLOSED = "Media engine closed"

    # Probe / Content Handles
    PROBE_RUNNING = "Probing duration of %s"
    PROBE_FAILED = "ffprobe failed for %s: %s"
    HANDLE_CREATED = "Created temporary content file %s"
    HANDLE_REVOKED = "Removed temporary content file %s"
    HANDLE_REVOKE_FAILED = "Failed to remove temporary content file %s: %r"
    HANDLES_REVOKED_ALL = "Revoked %d temporary content handles"
