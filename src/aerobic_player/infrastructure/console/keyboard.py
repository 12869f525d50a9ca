"""Single-key transport controls read line by line from a text stream."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import IO, TYPE_CHECKING, Any

from aerobic_player.domain.shared.constants import PlaybackDefaults
from aerobic_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from aerobic_player.application.services.library_service import LibraryService
    from aerobic_player.application.services.sequencer import PlaybackSequencer

logger = logging.getLogger(__name__)

HELP_TEXT = "keys: p = pause/resume, n = next segment, s = stop, + / - = seek"


class KeyboardControls:
    """Maps ``p``, ``n``, ``s``, ``+`` and ``-`` lines to transport commands."""

    def __init__(
        self,
        sequencer: PlaybackSequencer,
        library: LibraryService,
        *,
        seek_step: float = PlaybackDefaults.SEEK_STEP_SECONDS,
        stream: IO[str] | None = None,
    ) -> None:
        self._sequencer = sequencer
        self._library = library
        self._seek_step = seek_step
        self._stream = stream or sys.stdin
        self._tasks: set[asyncio.Task[Any]] = set()
        self._attached = False

    def handle_line(self, line: str) -> bool:
        """Run the command for *line*. Returns False for unknown input."""
        key = line.strip().lower()
        if key == "p":
            self._spawn(self._sequencer.toggle_pause())
        elif key == "n":
            self._sequencer.skip_segment()
        elif key == "s":
            self._library.stop_playback()
        elif key == "+":
            self._sequencer.seek_by(self._seek_step)
        elif key == "-":
            self._sequencer.seek_by(-self._seek_step)
        else:
            return False
        return True

    def _spawn(self, coro: Any) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_readable(self) -> None:
        line = self._stream.readline()
        if not line:
            self.detach()
            return
        if line.strip() and not self.handle_line(line):
            logger.info(HELP_TEXT)

    def attach(self) -> bool:
        """Start reading the stream on the running loop. Returns False if unsupported."""
        loop = asyncio.get_running_loop()
        try:
            loop.add_reader(self._stream.fileno(), self._on_readable)
        except (NotImplementedError, OSError, ValueError) as e:
            logger.debug(LogTemplates.KEYBOARD_UNAVAILABLE, e)
            return False
        self._attached = True
        return True

    def detach(self) -> None:
        if not self._attached:
            return
        asyncio.get_running_loop().remove_reader(self._stream.fileno())
        self._attached = False
