"""Status sink that renders playback events on a text stream."""

from __future__ import annotations

import logging
import sys
from typing import IO

from aerobic_player.domain.playback.events import (
    GapStarted,
    ProgressUpdated,
    SegmentStarted,
    StateChanged,
    StatusEvent,
    StatusMessage,
    StatusSink,
)
from aerobic_player.domain.playback.value_objects import PlaybackMode
from aerobic_player.domain.shared.messages import LogTemplates
from aerobic_player.utils.formatting import format_duration, format_window, progress_bar

logger = logging.getLogger(__name__)


class ConsoleStatusSink(StatusSink):
    """Writes one line per status event.

    Progress updates rewrite the current line when the stream is a terminal
    and are left out otherwise, so redirected output stays readable.
    """

    def __init__(self, stream: IO[str] | None = None, *, show_progress: bool | None = None) -> None:
        self._stream = stream or sys.stdout
        if show_progress is None:
            show_progress = hasattr(self._stream, "isatty") and self._stream.isatty()
        self._show_progress = show_progress
        self._progress_open = False

    def handle(self, event: StatusEvent) -> None:
        logger.debug(LogTemplates.STATUS_EVENT_RECEIVED, event.kind)
        match event:
            case ProgressUpdated():
                if self._show_progress:
                    self._write_progress(event)
            case SegmentStarted():
                self._write_line(self.describe_segment(event))
            case GapStarted():
                self._write_line(f"[gap] {event.note}")
            case StatusMessage():
                self._write_line(f"[msg] {event.note}")
            case StateChanged():
                if event.is_paused:
                    self._write_line("[state] paused")
                elif not event.is_playing:
                    self._write_line("[state] idle")
            case _:
                pass

    @staticmethod
    def describe_segment(event: SegmentStarted) -> str:
        parts = [f"[play] {event.item_name}"]
        if event.note:
            parts.append(event.note)
        if event.mode == PlaybackMode.CHUNKS and event.chunk_index:
            parts.append(format_window(event.segment_start, event.segment_end))
        return " · ".join(parts)

    def _write_progress(self, event: ProgressUpdated) -> None:
        current = format_duration(event.current_time) or "00:00"
        total = format_duration(event.item_duration) or "00:00"
        bar = progress_bar(event.current_time, event.item_duration)
        self._stream.write(f"\r  [{bar}] {current} / {total}")
        self._stream.flush()
        self._progress_open = True

    def _write_line(self, text: str) -> None:
        if self._progress_open:
            self._stream.write("\n")
            self._progress_open = False
        self._stream.write(text + "\n")
        self._stream.flush()
