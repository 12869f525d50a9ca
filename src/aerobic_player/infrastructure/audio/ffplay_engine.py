"""
FFplay Media Engine

Infrastructure component that plays local media files through ``ffplay``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import suppress
from typing import TYPE_CHECKING

from aerobic_player.application.interfaces.media_engine import (
    MediaEngine,
    MediaEvent,
    MediaListener,
)
from aerobic_player.domain.playback.value_objects import clamp
from aerobic_player.domain.shared.constants import MediaDefaults
from aerobic_player.domain.shared.exceptions import EnginePlaybackError, MetadataError
from aerobic_player.domain.shared.messages import LogTemplates
from aerobic_player.infrastructure.audio.models import FFplayConfig, PlayerState

if TYPE_CHECKING:
    from aerobic_player.infrastructure.audio.ffprobe import FFprobeDurationProbe

logger = logging.getLogger(__name__)


class FFplayMediaEngine(MediaEngine):
    """Media engine backed by one ``ffplay`` process per uninterrupted play span.

    ffplay cannot be paused or repositioned from outside, so the position is
    kept on the event loop clock: pausing records the offset and terminates
    the process, and playing or seeking starts a new process at that offset.
    Position updates are emitted every ``tick_interval`` seconds while
    playing; a process that exits on its own marks the end of the media.
    """

    def __init__(
        self,
        probe: FFprobeDurationProbe,
        *,
        ffplay_path: str = MediaDefaults.FFPLAY_PATH,
        tick_interval: float = MediaDefaults.TICK_INTERVAL_SECONDS,
        config: FFplayConfig | None = None,
    ) -> None:
        self._probe = probe
        self._ffplay_path = ffplay_path
        self._tick_interval = tick_interval
        self._config = config or FFplayConfig()

        self._listeners: dict[MediaEvent, list[MediaListener]] = defaultdict(list)

        self._source: str | None = None
        self._duration = 0.0
        self._ready = False
        self._paused = True
        self._position = 0.0
        self._started_at: float | None = None
        self._last_error: Exception | None = None
        self._state = PlayerState.IDLE

        # Bumped whenever the running span is invalidated (pause, seek, load).
        self._span = 0
        self._process: asyncio.subprocess.Process | None = None
        self._load_task: asyncio.Task[None] | None = None
        self._ticker: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[None]] = set()

    # === Properties ===

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def current_time(self) -> float:
        if self._started_at is None:
            return self._position
        elapsed = asyncio.get_running_loop().time() - self._started_at
        return clamp(self._position + elapsed, 0.0, self._duration)

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def state(self) -> PlayerState:
        return self._state

    # === Listeners ===

    def add_listener(self, event: MediaEvent, callback: MediaListener) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: MediaEvent, callback: MediaListener) -> None:
        listeners = self._listeners[event]
        if callback in listeners:
            listeners.remove(callback)

    def _emit(self, event: MediaEvent) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback()
            except Exception:
                logger.exception(LogTemplates.ENGINE_LISTENER_ERROR, event.value)

    # === Source ===

    def load(self, uri: str) -> None:
        logger.debug(LogTemplates.ENGINE_LOADING, uri)
        self._invalidate_span()
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()

        self._source = uri
        self._duration = 0.0
        self._ready = False
        self._paused = True
        self._position = 0.0
        self._last_error = None
        self._state = PlayerState.LOADING
        self._load_task = asyncio.get_running_loop().create_task(self._load_metadata(uri))

    async def _load_metadata(self, uri: str) -> None:
        try:
            duration = await self._probe.probe_path(uri)
        except MetadataError as e:
            if self._source != uri:
                return
            logger.warning(LogTemplates.ENGINE_METADATA_FAILED, uri, e)
            self._last_error = e
            self._state = PlayerState.ERROR
            self._emit(MediaEvent.ERROR)
            return

        if self._source != uri:
            return
        self._duration = duration
        self._ready = True
        self._state = PlayerState.READY
        logger.debug(LogTemplates.ENGINE_METADATA_READY, uri, duration)
        self._emit(MediaEvent.METADATA_READY)

    # === Transport ===

    async def play(self) -> None:
        if not self._ready or self._source is None:
            raise MetadataError(self._source)
        if not self._paused:
            return

        if self._position >= self._duration:
            self._position = 0.0
        self._paused = False
        self._state = PlayerState.PLAYING
        try:
            await self._spawn(self._span)
        except OSError as e:
            self._paused = True
            self._state = PlayerState.ERROR
            self._last_error = e
            raise

        if self._ticker is None or self._ticker.done():
            self._ticker = asyncio.get_running_loop().create_task(self._tick())

    def pause(self) -> None:
        if self._paused:
            return
        self._paused = True
        self._state = PlayerState.PAUSED
        self._invalidate_span()

    def seek(self, seconds: float) -> None:
        upper = self._duration if self._ready else max(0.0, seconds)
        target = clamp(seconds, 0.0, upper)
        if self._paused:
            self._position = target
            return

        self._invalidate_span()
        self._position = target
        task = asyncio.get_running_loop().create_task(self._respawn(self._span))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _respawn(self, span: int) -> None:
        try:
            await self._spawn(span)
        except OSError as e:
            self._fail(e)

    async def _spawn(self, span: int) -> None:
        assert self._source is not None
        args = self._config.build_args(self._ffplay_path, self._source, self._position)
        process = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )

        # paused, seeked or reloaded while the process was starting
        if span != self._span or self._paused:
            self._terminate(process)
            return

        self._process = process
        self._started_at = asyncio.get_running_loop().time()
        logger.debug(LogTemplates.ENGINE_PROCESS_STARTED, process.pid, self._position)

        watcher = asyncio.get_running_loop().create_task(self._watch(process))
        self._background.add(watcher)
        watcher.add_done_callback(self._background.discard)

    async def _watch(self, process: asyncio.subprocess.Process) -> None:
        _, stderr = await process.communicate()
        logger.debug(LogTemplates.ENGINE_PROCESS_ENDED, process.returncode)
        if self._process is not process:
            return

        self._process = None
        if process.returncode != 0:
            detail = (stderr or b"").decode(errors="replace").strip()
            self._fail(EnginePlaybackError(detail or None))
            return

        self._position = self._duration
        self._started_at = None
        self._paused = True
        self._state = PlayerState.READY
        self._emit(MediaEvent.ENDED)

    def _fail(self, error: Exception) -> None:
        self._position = self.current_time
        self._started_at = None
        self._paused = True
        self._state = PlayerState.ERROR
        self._last_error = error
        self._emit(MediaEvent.ERROR)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            if not self._paused and self._started_at is not None:
                self._emit(MediaEvent.TIME_UPDATE)

    def _invalidate_span(self) -> None:
        self._span += 1
        if self._started_at is not None:
            self._position = self.current_time
        self._started_at = None
        process, self._process = self._process, None
        if process is not None:
            self._terminate(process)

    def _terminate(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError as e:
            logger.debug(LogTemplates.ENGINE_PROCESS_TERMINATE_FAILED, e)

    async def close(self) -> None:
        self._paused = True
        self._invalidate_span()
        tasks = [t for t in (self._load_task, self._ticker, *self._background) if t is not None]
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._load_task = None
        self._ticker = None
        self._state = PlayerState.IDLE
        logger.info(LogTemplates.ENGINE_CLOSED)
