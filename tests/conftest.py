import asyncio
from collections import defaultdict

import pytest
import pytest_asyncio

from aerobic_player.application.interfaces.content import ContentHandleFactory, DurationProbe
from aerobic_player.application.interfaces.media_engine import MediaEngine, MediaEvent
from aerobic_player.domain.playback.events import StatusSink
from aerobic_player.domain.playback.value_objects import ContentHandle
from aerobic_player.domain.shared.exceptions import MetadataError

# ============================================================================
# Test Doubles
# ============================================================================


class FakeMediaEngine(MediaEngine):
    """In-process media engine driven explicitly by the test.

    Metadata is ready synchronously on ``load``; the position only moves when
    the test calls ``advance_to``.
    """

    def __init__(self, default_duration: float = 100.0) -> None:
        self._listeners = defaultdict(list)
        self._source = None
        self._ready = False
        self._duration = 0.0
        self._current_time = 0.0
        self._paused = True
        self._last_error = None
        self.default_duration = default_duration

        self.fail_load = False
        self.hold_metadata = False
        self.play_error = None
        self.before_play = None
        self.play_calls = 0
        self.load_calls = []
        self.seeks = []
        self.closed = False

    @property
    def source(self):
        return self._source

    @property
    def ready(self):
        return self._ready

    @property
    def duration(self):
        return self._duration

    @property
    def current_time(self):
        return self._current_time

    @property
    def paused(self):
        return self._paused

    @property
    def last_error(self):
        return self._last_error

    def load(self, uri):
        self.load_calls.append(uri)
        self._source = uri
        self._current_time = 0.0
        self._paused = True
        if self.hold_metadata:
            self._ready = False
            return
        if self.fail_load:
            self._ready = False
            self._last_error = MetadataError(uri)
            self._emit(MediaEvent.ERROR)
            return
        self._ready = True
        self._duration = self.default_duration
        self._emit(MediaEvent.METADATA_READY)

    async def play(self):
        self.play_calls += 1
        if self.before_play is not None:
            self.before_play()
        if self.play_error is not None:
            raise self.play_error
        self._paused = False

    def pause(self):
        self._paused = True

    def seek(self, seconds):
        self.seeks.append(seconds)
        self._current_time = seconds

    def add_listener(self, event, callback):
        self._listeners[event].append(callback)

    def remove_listener(self, event, callback):
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def listener_count(self, event):
        return len(self._listeners[event])

    async def close(self):
        self.closed = True

    # --- test controls ---

    def advance_to(self, seconds):
        self._current_time = seconds
        self._emit(MediaEvent.TIME_UPDATE)

    def finish(self):
        self._paused = True
        self._emit(MediaEvent.ENDED)

    def emit_error(self, error):
        self._last_error = error
        self._emit(MediaEvent.ERROR)

    def _emit(self, event):
        for callback in list(self._listeners[event]):
            callback()


class FakeDurationProbe(DurationProbe):
    """Returns a duration per content blob and counts calls."""

    def __init__(self, durations=None, default=60.0, error=None):
        self.durations = durations or {}
        self.default = default
        self.error = error
        self.calls = 0

    async def probe(self, content, kind=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.durations.get(content, self.default)


class FakeHandleFactory(ContentHandleFactory):
    """Hands out ``mem://`` handles and records revocations."""

    def __init__(self):
        self.created = []
        self.revoked = []

    def create(self, content, kind=None):
        handle = ContentHandle(f"mem://{len(self.created)}")
        self.created.append(handle)
        return handle

    def revoke(self, handle):
        self.revoked.append(handle)

    def revoke_all(self):
        live = [h for h in self.created if h not in self.revoked]
        self.revoked.extend(live)
        return len(live)


class RecordingSink(StatusSink):
    """Collects every status event it receives."""

    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)

    def of_kind(self, kind):
        return [e for e in self.events if e.kind == kind]

    @property
    def last_state(self):
        states = self.of_kind("state")
        return states[-1] if states else None

    @property
    def notes(self):
        return [e.note for e in self.of_kind("message")]


async def settle(rounds: int = 20) -> None:
    """Let pending callbacks and tasks on the loop run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_item():
    """Factory for playlist items with content and an optional known duration."""
    from aerobic_player.domain.playback.items import PlaylistItem

    def _make(item_id="a", duration=100.0, content=None, name=None, order=0):
        item = PlaylistItem(
            id=item_id,
            name=name or f"{item_id}.mp3",
            kind="audio/mpeg",
            order=order,
            duration=duration,
        )
        item.set_content(content if content is not None else item_id.encode())
        return item

    return _make


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def engine():
    return FakeMediaEngine()


@pytest.fixture
def probe():
    return FakeDurationProbe()


@pytest.fixture
def handle_factory():
    return FakeHandleFactory()


@pytest.fixture
def recorder():
    return RecordingSink()


@pytest.fixture
def broadcaster():
    from aerobic_player.domain.playback.events import StatusBroadcaster

    return StatusBroadcaster()


@pytest.fixture
def sequencer(engine, probe, handle_factory, broadcaster, recorder):
    """Sequencer over the fake engine with a recording sink attached."""
    from aerobic_player.application.services.sequencer import PlaybackSequencer

    seq = PlaybackSequencer(
        engine,
        duration_probe=probe,
        handle_factory=handle_factory,
        completion_epsilon=0.05,
        broadcaster=broadcaster,
    )
    seq.subscribe(recorder)
    return seq


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from aerobic_player.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def item_repository(in_memory_database):
    """Create an item repository with in-memory database."""
    from aerobic_player.infrastructure.persistence.repositories.item_repository import (
        SQLiteItemRepository,
    )

    return SQLiteItemRepository(in_memory_database)


@pytest_asyncio.fixture
async def settings_repository(in_memory_database):
    """Create a settings repository with in-memory database."""
    from aerobic_player.infrastructure.persistence.repositories.settings_repository import (
        SQLiteSettingsRepository,
    )

    return SQLiteSettingsRepository(in_memory_database)


@pytest_asyncio.fixture
async def library(item_repository, settings_repository, sequencer, probe, broadcaster):
    """Library service over the in-memory store and the fake engine."""
    from aerobic_player.application.services.library_service import LibraryService

    service = LibraryService(
        item_repository=item_repository,
        settings_repository=settings_repository,
        sequencer=sequencer,
        duration_probe=probe,
        broadcaster=broadcaster,
        save_delay=0.01,
    )
    yield service
    sequencer.stop()
    await service.close()
