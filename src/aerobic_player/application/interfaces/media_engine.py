"""Port interface for the single-source media engine driven by the sequencer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum

MediaListener = Callable[[], None]


class MediaEvent(StrEnum):
    """Notifications a media engine delivers to its listeners."""

    METADATA_READY = "metadata_ready"
    TIME_UPDATE = "time_update"
    ENDED = "ended"
    ERROR = "error"


class MediaEngine(ABC):
    """Interface for an engine that plays one source at a time.

    Listeners are plain callables invoked on the event loop thread; they read
    whatever they need back from the engine's properties.
    """

    @property
    @abstractmethod
    def source(self) -> str | None:
        """URI of the loaded source, if any."""
        ...

    @property
    @abstractmethod
    def ready(self) -> bool:
        """True once metadata of the loaded source is available."""
        ...

    @property
    @abstractmethod
    def duration(self) -> float:
        ...

    @property
    @abstractmethod
    def current_time(self) -> float:
        ...

    @property
    @abstractmethod
    def paused(self) -> bool:
        ...

    @property
    @abstractmethod
    def last_error(self) -> Exception | None:
        """The error behind the most recent ``ERROR`` event."""
        ...

    @abstractmethod
    def load(self, uri: str) -> None:
        """Replace the source; metadata is reported asynchronously."""
        ...

    @abstractmethod
    async def play(self) -> None:
        """Start or resume output from the current position.

        Raises:
            Exception: If the engine rejects the request.
        """
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    def add_listener(self, event: MediaEvent, callback: MediaListener) -> None:
        ...

    @abstractmethod
    def remove_listener(self, event: MediaEvent, callback: MediaListener) -> None:
        """Detach *callback*. Unknown callbacks are ignored."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Stop output and release every process or handle the engine holds."""
        ...
