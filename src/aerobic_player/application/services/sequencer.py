"""Playback Sequencer - drives the media engine through a mode's segment plan."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aerobic_player.application.interfaces.media_engine import MediaEvent
from aerobic_player.domain.playback.configuration import PlaybackConfig, resolve_mode_config
from aerobic_player.domain.playback.events import (
    GapStarted,
    ProgressUpdated,
    SegmentStarted,
    StateChanged,
    StatusBroadcaster,
    StatusEvent,
    StatusMessage,
    StatusSink,
)
from aerobic_player.domain.playback.planning import plan_segments
from aerobic_player.domain.playback.segments import AudioSegment, GapSegment, Segment
from aerobic_player.domain.playback.value_objects import ConclusionReason, clamp
from aerobic_player.domain.shared.constants import PlaybackDefaults
from aerobic_player.domain.shared.exceptions import (
    EmptyPlaylistError,
    EnginePlaybackError,
    EngineStartError,
    MetadataError,
)
from aerobic_player.domain.shared.messages import LogTemplates, StatusNotes

if TYPE_CHECKING:
    from aerobic_player.application.interfaces.content import ContentHandleFactory, DurationProbe
    from aerobic_player.application.interfaces.media_engine import MediaEngine
    from aerobic_player.domain.playback.items import PlaylistItem

logger = logging.getLogger(__name__)


@dataclass
class TransportState:
    """Mutable transport flags shared by the run loop and the transport commands."""

    is_playing: bool = False
    is_paused: bool = False
    stop_requested: bool = False
    skip_requested: bool = False
    start_paused: bool = False

    def reset(self) -> None:
        self.is_playing = False
        self.is_paused = False
        self.stop_requested = False
        self.skip_requested = False
        self.start_paused = False


class SegmentCompletion:
    """One-shot conclusion of a single segment.

    Created before the segment performs any await, so a conclusion that
    arrives while the engine is still starting is kept. Only the first
    ``conclude``/``fail`` takes effect.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[ConclusionReason] = (
            asyncio.get_running_loop().create_future()
        )

    @property
    def done(self) -> bool:
        return self._future.done()

    def conclude(self, reason: ConclusionReason) -> bool:
        if self._future.done():
            return False
        self._future.set_result(reason)
        return True

    def fail(self, error: BaseException) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(error)
        return True

    def cancel(self) -> None:
        self._future.cancel()

    async def wait(self) -> ConclusionReason:
        return await self._future


@dataclass
class ActiveSegment:
    segment: Segment
    completion: SegmentCompletion

    @property
    def audio(self) -> AudioSegment | None:
        return self.segment if isinstance(self.segment, AudioSegment) else None


class PlaybackSequencer:
    """Runs one playback at a time over a single media engine.

    ``play`` resolves item durations, builds the lazy segment plan for the
    configured mode and executes the segments strictly one after another.
    Transport commands (pause, resume, seek, skip, stop) act on whichever
    segment is in flight. Status is reported to subscribed sinks.
    """

    def __init__(
        self,
        engine: MediaEngine,
        *,
        duration_probe: DurationProbe,
        handle_factory: ContentHandleFactory,
        completion_epsilon: float = PlaybackDefaults.COMPLETION_EPSILON,
        broadcaster: StatusBroadcaster | None = None,
    ) -> None:
        self._engine = engine
        self._probe = duration_probe
        self._handles = handle_factory
        self._epsilon = max(0.0, completion_epsilon)
        self._broadcaster = broadcaster or StatusBroadcaster()

        self._transport = TransportState()
        self._active: ActiveSegment | None = None
        self._gap_timer: asyncio.TimerHandle | None = None
        self._metadata_wait: asyncio.Future[None] | None = None
        self._mode: str | None = None

        self._engine.add_listener(MediaEvent.TIME_UPDATE, self._on_time_update)
        self._engine.add_listener(MediaEvent.ENDED, self._on_ended)
        self._engine.add_listener(MediaEvent.ERROR, self._on_engine_error)

    # === Status listeners ===

    def subscribe(self, sink: StatusSink) -> None:
        self._broadcaster.subscribe(sink)

    def unsubscribe(self, sink: StatusSink) -> None:
        self._broadcaster.unsubscribe(sink)

    # === Read-only state ===

    @property
    def playing(self) -> bool:
        return self._transport.is_playing

    @property
    def paused(self) -> bool:
        return self._transport.is_paused

    @property
    def has_active_segment(self) -> bool:
        """True while an audio segment is current."""
        return self._active is not None and self._active.audio is not None

    @property
    def mode(self) -> str | None:
        """Mode of the current run, or of the last one once idle."""
        return self._mode

    @property
    def current_item_id(self) -> str | None:
        if self._active is None or self._active.audio is None:
            return None
        return self._active.audio.item.id

    @property
    def transport(self) -> TransportState:
        return self._transport

    # === Run loop ===

    async def play(self, items: Sequence[PlaylistItem], config: PlaybackConfig) -> None:
        """Play *items* according to *config* until the plan ends or ``stop`` is called.

        Raises:
            EmptyPlaylistError: If *items* is empty.
            UnknownModeError: If the configured mode is not recognized.
            NoPlayableItemError: If single/half mode has no item to focus on.
            NoDurationError: If the focus item has no usable duration.
            MetadataError: If the engine cannot load an item's metadata.
            EngineStartError: If the engine rejects playback before any stop.
            EnginePlaybackError: If the engine fails while a segment plays.
        """
        if self._transport.is_playing:
            logger.warning(LogTemplates.SEQUENCER_ALREADY_PLAYING)
            return
        if not items:
            raise EmptyPlaylistError()

        self._transport.reset()
        self._mode = str(getattr(config, "mode", "")) or None
        self._transport.is_playing = True
        self._emit_state()
        logger.info(LogTemplates.SEQUENCER_RUN_STARTED, self._mode, len(items))

        try:
            for item in items:
                await item.resolve_duration(self._probe)

            mode_config = resolve_mode_config(config)
            plan = plan_segments(items, mode_config)

            for segment in plan:
                if self._transport.stop_requested:
                    break
                if isinstance(segment, GapSegment):
                    await self._run_gap(segment)
                else:
                    await self._run_audio(segment)

            stopped = self._transport.stop_requested
            if not stopped:
                self._emit(StatusMessage(mode=self._mode, note=StatusNotes.FINISHED))
            logger.info(LogTemplates.SEQUENCER_RUN_FINISHED, self._mode, stopped)
        except Exception as e:
            logger.warning(LogTemplates.SEQUENCER_RUN_FAILED, e)
            raise
        finally:
            self._teardown()

    async def _run_audio(self, segment: AudioSegment) -> ConclusionReason:
        if self._transport.stop_requested:
            return ConclusionReason.STOP

        segment = segment.clamped()
        if segment.is_empty:
            logger.debug(
                LogTemplates.SEQUENCER_SEGMENT_EMPTY, segment.item.id, segment.start, segment.end
            )
            return ConclusionReason.COMPLETE

        handle = segment.item.content_handle(self._handles)
        await self._ensure_source(handle.uri)
        if self._transport.stop_requested:
            return ConclusionReason.STOP

        completion = SegmentCompletion()
        self._active = ActiveSegment(segment, completion)
        self._transport.skip_requested = False

        start_paused = self._transport.start_paused
        self._transport.start_paused = False
        self._transport.is_paused = start_paused
        self._emit_state()
        self._emit_segment_started(segment)
        logger.debug(
            LogTemplates.SEQUENCER_SEGMENT_STARTED,
            segment.item.id,
            segment.start,
            segment.end,
            segment.note,
        )

        self._engine.seek(segment.start)
        if start_paused:
            self._engine.pause()
        else:
            try:
                await self._engine.play()
            except Exception as e:
                if self._active is not None and self._active.completion is completion:
                    self._active = None
                if self._transport.stop_requested:
                    logger.debug(LogTemplates.SEQUENCER_ENGINE_START_SUPPRESSED, e)
                    completion.cancel()
                    return ConclusionReason.STOP
                logger.warning(LogTemplates.SEQUENCER_ENGINE_START_FAILED, e)
                completion.cancel()
                raise EngineStartError() from e

            # concluded while the engine was starting
            if completion.done and not self._engine.paused:
                self._engine.pause()

        reason = await completion.wait()
        logger.debug(LogTemplates.SEQUENCER_SEGMENT_CONCLUDED, segment.item.id, reason)
        return reason

    async def _ensure_source(self, uri: str) -> None:
        """Load *uri* into the engine unless it is already loaded and ready.

        A source that failed to load earlier is loaded again. ``stop`` ends
        the wait early; the caller checks ``stop_requested`` afterwards.
        """
        engine = self._engine
        if engine.source == uri and engine.ready:
            return

        metadata: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def on_ready() -> None:
            if not metadata.done():
                metadata.set_result(None)

        def on_error() -> None:
            if not metadata.done():
                metadata.set_exception(MetadataError(uri))

        engine.add_listener(MediaEvent.METADATA_READY, on_ready)
        engine.add_listener(MediaEvent.ERROR, on_error)
        self._metadata_wait = metadata
        try:
            engine.load(uri)
            if not metadata.done() and engine.ready:
                return
            await metadata
        finally:
            self._metadata_wait = None
            engine.remove_listener(MediaEvent.METADATA_READY, on_ready)
            engine.remove_listener(MediaEvent.ERROR, on_error)

    async def _run_gap(self, segment: GapSegment) -> ConclusionReason:
        if segment.seconds <= 0 or self._transport.stop_requested:
            return ConclusionReason.COMPLETE

        completion = SegmentCompletion()
        self._active = ActiveSegment(segment, completion)
        self._emit(GapStarted(mode=self._mode, note=segment.note))
        logger.debug(LogTemplates.SEQUENCER_GAP_STARTED, segment.seconds)

        self._gap_timer = asyncio.get_running_loop().call_later(
            segment.seconds, self._on_gap_elapsed
        )
        return await completion.wait()

    def _on_gap_elapsed(self) -> None:
        self._gap_timer = None
        self._finish_segment(ConclusionReason.COMPLETE)

    def _cancel_gap_timer(self) -> None:
        if self._gap_timer is not None:
            self._gap_timer.cancel()
            self._gap_timer = None

    def _finish_segment(self, reason: ConclusionReason) -> None:
        active = self._active
        if active is None:
            return

        segment = active.audio
        if segment is None:
            self._cancel_gap_timer()
        else:
            if not self._engine.paused:
                self._engine.pause()
            if reason is not ConclusionReason.SKIP:
                current = self._engine.current_time or segment.end
                self._engine.seek(clamp(current, segment.start, segment.end))
                self._emit_progress(segment, segment.end)

        self._active = None
        active.completion.conclude(reason)

    def _teardown(self) -> None:
        self._cancel_gap_timer()
        if self._active is not None:
            self._active.completion.cancel()
            self._active = None
        self._transport.is_playing = False
        self._transport.is_paused = False
        self._transport.start_paused = False
        self._emit_state()

    # === Media engine events ===

    def _on_time_update(self) -> None:
        if self._active is None or self._active.audio is None or self._transport.is_paused:
            return
        segment = self._active.audio
        current = self._engine.current_time
        if self._transport.skip_requested:
            self._finish_segment(ConclusionReason.SKIP)
            return
        if current >= segment.end - self._epsilon:
            self._finish_segment(ConclusionReason.COMPLETE)
            return
        self._emit_progress(segment, current)

    def _on_ended(self) -> None:
        if self.has_active_segment and not self._transport.is_paused:
            self._finish_segment(ConclusionReason.COMPLETE)

    def _on_engine_error(self) -> None:
        active = self._active
        if active is None or active.audio is None:
            return
        error = self._engine.last_error
        logger.warning(LogTemplates.SEQUENCER_ENGINE_ERROR, error)
        self._active = None
        if not self._engine.paused:
            self._engine.pause()
        failure = EnginePlaybackError()
        failure.__cause__ = error
        active.completion.fail(failure)

    # === Transport ===

    def pause(self) -> None:
        if not self._transport.is_playing or self._transport.is_paused:
            return
        if not self.has_active_segment:
            return
        self._engine.pause()
        self._transport.is_paused = True
        logger.debug(LogTemplates.SEQUENCER_PAUSED)
        self._emit_state()

    async def resume(self) -> None:
        if not self._transport.is_playing or not self._transport.is_paused:
            return
        if not self.has_active_segment:
            return
        try:
            await self._engine.play()
        except Exception as e:
            logger.warning(LogTemplates.SEQUENCER_RESUME_FAILED, e)
            return
        self._transport.is_paused = False
        logger.debug(LogTemplates.SEQUENCER_RESUMED)
        self._emit_state()

    async def toggle_pause(self) -> None:
        if not self._transport.is_playing:
            return
        if self._transport.is_paused:
            await self.resume()
        else:
            self.pause()

    def seek_by(self, delta_seconds: float) -> None:
        if self._active is None or self._active.audio is None:
            return
        segment = self._active.audio
        target = clamp(self._engine.current_time + delta_seconds, segment.start, segment.end)
        self._engine.seek(target)
        logger.debug(LogTemplates.SEQUENCER_SEEK, target)
        self._emit_progress(segment, target)

    def skip_segment(self) -> None:
        if self._active is None:
            return
        if self._active.audio is None:
            self._finish_segment(ConclusionReason.SKIP)
            return
        logger.debug(LogTemplates.SEQUENCER_SKIP, self._transport.is_paused)
        self._transport.start_paused = self._transport.is_paused
        self._transport.skip_requested = True
        self._finish_segment(ConclusionReason.SKIP)

    def stop(self) -> None:
        if not self._transport.is_playing and self._active is None:
            return
        logger.debug(LogTemplates.SEQUENCER_STOP)
        self._transport.stop_requested = True
        self._transport.skip_requested = False
        self._transport.start_paused = False
        if self._metadata_wait is not None and not self._metadata_wait.done():
            self._metadata_wait.set_result(None)
        if self._active is not None and self._active.audio is not None:
            self._engine.pause()
        self._finish_segment(ConclusionReason.STOP)

    # === Status emission ===

    def _emit(self, event: StatusEvent) -> None:
        self._broadcaster.publish(event)

    def _emit_state(self) -> None:
        self._emit(
            StateChanged(
                mode=self._mode,
                is_playing=self._transport.is_playing,
                is_paused=self._transport.is_paused,
            )
        )

    def _emit_segment_started(self, segment: AudioSegment) -> None:
        self._emit(
            SegmentStarted(
                mode=self._mode,
                item_id=segment.item.id,
                item_name=segment.item.name,
                note=segment.note,
                segment_start=segment.start,
                segment_end=segment.end,
                item_duration=segment.item.playable_duration,
                chunk_index=segment.chunk_index,
                chunk_total=segment.chunk_total,
                repeat_index=segment.repeat_index,
                repeat_total=segment.repeat_total,
            )
        )
        self._emit_progress(segment, segment.start)

    def _emit_progress(self, segment: AudioSegment, current_time: float) -> None:
        self._emit(
            ProgressUpdated(
                mode=self._mode,
                item_id=segment.item.id,
                item_name=segment.item.name,
                current_time=clamp(current_time, segment.start, segment.end),
                item_duration=segment.item.playable_duration,
                segment_start=segment.start,
                segment_end=segment.end,
                chunk_index=segment.chunk_index,
                chunk_total=segment.chunk_total,
                repeat_index=segment.repeat_index,
                repeat_total=segment.repeat_total,
            )
        )
