"""Status events emitted by the sequencer and the listeners that consume them."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from aerobic_player.domain.shared.messages import LogTemplates
from aerobic_player.domain.shared.types import NonNegativeFloat, PositiveInt

logger = logging.getLogger(__name__)


class StatusEvent(BaseModel):
    """Base class for all status events."""

    model_config = ConfigDict(frozen=True)

    kind: str
    mode: str | None = None


class StateChanged(StatusEvent):
    kind: Literal["state"] = "state"
    is_playing: bool = False
    is_paused: bool = False


class _ItemPosition(StatusEvent):
    item_id: str
    item_name: str
    segment_start: NonNegativeFloat
    segment_end: NonNegativeFloat
    item_duration: NonNegativeFloat
    chunk_index: PositiveInt | None = None
    chunk_total: PositiveInt | None = None
    repeat_index: PositiveInt | None = None
    repeat_total: PositiveInt | None = None


class SegmentStarted(_ItemPosition):
    kind: Literal["segment"] = "segment"
    note: str = ""


class ProgressUpdated(_ItemPosition):
    kind: Literal["progress"] = "progress"
    current_time: NonNegativeFloat


class GapStarted(StatusEvent):
    kind: Literal["gap"] = "gap"
    note: str = ""


class StatusMessage(StatusEvent):
    kind: Literal["message"] = "message"
    note: str


AnyStatusEvent = Annotated[
    StateChanged | SegmentStarted | ProgressUpdated | GapStarted | StatusMessage,
    Field(discriminator="kind"),
]


# === Listeners ===


class StatusSink(ABC):
    """Receives status events. Must not block; the sequencer never awaits it."""

    @abstractmethod
    def handle(self, event: StatusEvent) -> None: ...


class CallbackStatusSink(StatusSink):
    """Adapts a plain callable into a status sink."""

    def __init__(self, callback: Callable[[StatusEvent], None]) -> None:
        self._callback = callback

    def handle(self, event: StatusEvent) -> None:
        self._callback(event)

    def __repr__(self) -> str:
        return f"CallbackStatusSink({self._callback!r})"


class StatusBroadcaster:
    """Fans status events out to every subscribed sink.

    Sinks are called in subscription order. A sink that raises is logged and
    does not prevent the remaining sinks from receiving the event.
    """

    def __init__(self) -> None:
        self._sinks: list[StatusSink] = []

    def subscribe(self, sink: StatusSink) -> None:
        if sink in self._sinks:
            return
        self._sinks.append(sink)
        logger.debug(LogTemplates.STATUS_SINK_SUBSCRIBED, sink)

    def unsubscribe(self, sink: StatusSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)
            logger.debug(LogTemplates.STATUS_SINK_UNSUBSCRIBED, sink)

    @property
    def sink_count(self) -> int:
        return len(self._sinks)

    def publish(self, event: StatusEvent) -> None:
        for sink in list(self._sinks):
            try:
                sink.handle(event)
            except Exception:
                logger.exception(LogTemplates.STATUS_SINK_ERROR, sink, event.kind)

    def clear(self) -> None:
        """Remove all sinks."""
        self._sinks.clear()
