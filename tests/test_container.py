"""
Unit Tests for Dependency Injection Container

Tests for:
- Container initialization with settings
- Lazy initialization and caching of every component
- Wiring between the sequencer, library and adapters
- Lifecycle methods (initialize, shutdown)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from aerobic_player.config.container import Container, create_container
from aerobic_player.config.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings with an in-memory database and a private temp directory."""
    return Settings(
        _env_file=None,
        database={"url": "sqlite:///:memory:"},
        playback={"completion_epsilon": 0.1, "settings_save_delay_seconds": 0.01},
        media={"temp_dir": tmp_path, "ffplay_path": "/opt/ffplay"},
    )


@pytest.fixture
def container(settings):
    return Container(settings=settings)


# =============================================================================
# Container Initialization Tests
# =============================================================================


class TestContainerInitialization:
    """Unit tests for Container initialization."""

    def test_create_container_factory(self, settings):
        container = create_container(settings)
        assert isinstance(container, Container)
        assert container.settings is settings

    def test_initial_state_all_none(self, container):
        """Nothing is built until it is first accessed."""
        assert container._database is None
        assert container._item_repository is None
        assert container._settings_repository is None
        assert container._handle_factory is None
        assert container._duration_probe is None
        assert container._media_engine is None
        assert container._status_broadcaster is None
        assert container._sequencer is None
        assert container._library_service is None


# =============================================================================
# Lazy Properties
# =============================================================================


class TestLazyProperties:
    """Unit tests for lazily created components."""

    @pytest.mark.parametrize(
        "name",
        [
            "database",
            "item_repository",
            "settings_repository",
            "handle_factory",
            "duration_probe",
            "media_engine",
            "status_broadcaster",
            "sequencer",
            "library_service",
        ],
    )
    def test_property_is_cached(self, container, name):
        assert getattr(container, name) is getattr(container, name)

    def test_database_uses_settings(self, container):
        assert container.database.is_memory is True

    def test_repositories_share_database(self, container):
        assert container.item_repository._db is container.database
        assert container.settings_repository._db is container.database

    def test_media_adapters_use_settings(self, container, tmp_path):
        assert container.handle_factory._temp_dir == tmp_path
        assert container.media_engine._ffplay_path == "/opt/ffplay"
        assert container.media_engine._probe is container.duration_probe

    def test_sequencer_wiring(self, container):
        sequencer = container.sequencer

        assert sequencer._engine is container.media_engine
        assert sequencer._epsilon == 0.1
        assert sequencer._broadcaster is container.status_broadcaster

    def test_library_shares_broadcaster(self, container):
        library = container.library_service

        assert library._sequencer is container.sequencer
        assert library._broadcaster is container.status_broadcaster
        assert container.status_broadcaster.sink_count == 1


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestContainerLifecycle:
    """Unit tests for initialize and shutdown."""

    @pytest.mark.asyncio
    async def test_initialize_restores_library(self, container):
        await container.initialize()
        try:
            assert container.library_service.items == ()
            assert container.library_service.settings.mode == "continuous"
        finally:
            await container.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_without_use_is_noop(self, container):
        await container.shutdown()

        assert container._database is None
        assert container._media_engine is None

    @pytest.mark.asyncio
    async def test_shutdown_releases_resources(self, container):
        await container.initialize()
        handle = container.handle_factory.create(b"left over")

        await container.shutdown()

        assert not handle.path.exists()
        assert container.database._keepalive is None

    @pytest.mark.asyncio
    async def test_shutdown_continues_when_library_close_fails(self, container, caplog):
        container._library_service = MagicMock()
        container._library_service.close = AsyncMock(side_effect=RuntimeError("boom"))
        engine = MagicMock()
        engine.close = AsyncMock()
        container._media_engine = engine

        await container.shutdown()

        engine.close.assert_awaited_once()
        assert "Failed closing library service" in caplog.text
