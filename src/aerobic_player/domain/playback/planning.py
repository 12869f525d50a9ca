"""Segment plan generators, one per playback mode.

Every planner is a pure function of the (duration-resolved) item list and the
mode configuration. Focus-item validation happens when the plan is created;
the segments themselves are produced lazily so the sequencer can stop pulling
at any boundary. ``single`` mode yields forever.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from aerobic_player.domain.playback.configuration import (
    ChunksConfig,
    ContinuousConfig,
    GapConfig,
    HalfConfig,
    ModeConfig,
    SingleConfig,
)
from aerobic_player.domain.playback.items import PlaylistItem
from aerobic_player.domain.playback.segments import AudioSegment, GapSegment, Segment
from aerobic_player.domain.playback.value_objects import PlaybackMode, clamp
from aerobic_player.domain.shared.exceptions import (
    NoDurationError,
    NoPlayableItemError,
    UnknownModeError,
)
from aerobic_player.domain.shared.messages import StatusNotes

Plan = Iterator[Segment]


def select_focus_item(
    items: Sequence[PlaylistItem], selected_item_id: str | None, mode: str
) -> PlaylistItem:
    """Pick the configured item, falling back to the first one.

    Raises:
        NoPlayableItemError: If there is no item at all.
        NoDurationError: If the chosen item has no usable duration.
    """
    item = items[0] if items else None
    if selected_item_id:
        item = next((i for i in items if i.id == selected_item_id), item)
    if item is None:
        raise NoPlayableItemError(mode)
    if not item.playable_duration:
        raise NoDurationError(item.id)
    return item


def chunk_window(
    duration: float,
    chunk_index: int,
    chunk_count: int,
    lead_buffer: float = 0.0,
    tail_buffer: float = 0.0,
) -> tuple[float, float]:
    """Return the buffered ``(start, end)`` window of one chunk.

    The last chunk ends exactly at *duration* so rounding never loses the
    item's tail; buffers are reclamped into ``[0, duration]``.
    """
    width = duration / chunk_count
    chunk_start = width * chunk_index
    chunk_end = duration if chunk_index == chunk_count - 1 else width * (chunk_index + 1)
    return (
        clamp(chunk_start - lead_buffer, 0.0, duration),
        clamp(chunk_end + tail_buffer, 0.0, duration),
    )


def plan_continuous(items: Sequence[PlaylistItem], config: ContinuousConfig) -> Plan:
    for item in items:
        yield AudioSegment(item, 0.0, item.playable_duration, note=StatusNotes.CONTINUOUS)


def plan_gap(items: Sequence[PlaylistItem], config: GapConfig) -> Plan:
    pause = max(0.0, config.pause_seconds)
    note = StatusNotes.PAUSE_AFTER.format(seconds=pause) if pause > 0 else StatusNotes.PLAYING
    last = len(items) - 1
    for index, item in enumerate(items):
        yield AudioSegment(item, 0.0, item.playable_duration, note=note)
        if pause > 0 and index < last:
            yield GapSegment(pause, note=StatusNotes.GAP.format(seconds=pause))


def plan_single(items: Sequence[PlaylistItem], config: SingleConfig) -> Plan:
    item = select_focus_item(items, config.selected_item_id, PlaybackMode.SINGLE)
    return _repeat_forever(item)


def _repeat_forever(item: PlaylistItem) -> Plan:
    duration = item.playable_duration
    while True:
        yield AudioSegment(item, 0.0, duration, note=StatusNotes.SINGLE_LOOP)


def plan_half(items: Sequence[PlaylistItem], config: HalfConfig) -> Plan:
    item = select_focus_item(items, config.selected_item_id, PlaybackMode.HALF)
    buffer = max(0.0, config.half_buffer_seconds)
    return _half_then_full(item, buffer)


def _half_then_full(item: PlaylistItem, buffer: float) -> Plan:
    duration = item.playable_duration
    first_end = min(duration, duration / 2 + buffer)
    yield AudioSegment(item, 0.0, first_end, note=StatusNotes.HALF_FIRST.format(seconds=buffer))
    yield AudioSegment(item, 0.0, duration, note=StatusNotes.HALF_FULL)


def plan_chunks(items: Sequence[PlaylistItem], config: ChunksConfig) -> Plan:
    """Chunk-major order: every item plays chunk N (repeated) before chunk N+1."""
    count = config.chunk_count
    repeats = config.chunk_repeats
    for chunk_index in range(count):
        for repeat_index in range(repeats):
            for item in items:
                duration = item.playable_duration
                if not duration:
                    continue
                start, end = chunk_window(
                    duration,
                    chunk_index,
                    count,
                    config.chunk_lead_buffer,
                    config.chunk_tail_buffer,
                )
                yield AudioSegment(
                    item,
                    start,
                    end,
                    note=StatusNotes.CHUNK.format(
                        chunk_index=chunk_index + 1,
                        chunk_total=count,
                        repeat_index=repeat_index + 1,
                        repeat_total=repeats,
                    ),
                    chunk_index=chunk_index + 1,
                    chunk_total=count,
                    repeat_index=repeat_index + 1,
                    repeat_total=repeats,
                )


def plan_segments(items: Sequence[PlaylistItem], config: ModeConfig) -> Plan:
    """Dispatch to the planner of the configured mode."""
    match config:
        case ContinuousConfig():
            return plan_continuous(items, config)
        case GapConfig():
            return plan_gap(items, config)
        case SingleConfig():
            return plan_single(items, config)
        case HalfConfig():
            return plan_half(items, config)
        case ChunksConfig():
            return plan_chunks(items, config)
        case _:
            raise UnknownModeError(getattr(config, "mode", config))
