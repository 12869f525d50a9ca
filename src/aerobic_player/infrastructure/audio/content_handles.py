"""Temporary-file content handles for the ffmpeg based adapters."""

from __future__ import annotations

import logging
import mimetypes
import os
import tempfile
from pathlib import Path

from aerobic_player.application.interfaces.content import ContentHandleFactory
from aerobic_player.domain.playback.value_objects import ContentHandle
from aerobic_player.domain.shared.constants import MediaDefaults
from aerobic_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class TempFileHandleFactory(ContentHandleFactory):
    """Writes content to a temporary file and hands out its path.

    Every issued handle is tracked until it is revoked, so whatever is still
    live can be cleaned up in one call on shutdown.
    """

    def __init__(
        self,
        temp_dir: str | Path | None = None,
        *,
        prefix: str = MediaDefaults.TEMP_FILE_PREFIX,
    ) -> None:
        self._temp_dir = Path(temp_dir) if temp_dir else None
        self._prefix = prefix
        self._live: set[str] = set()

    @property
    def live_count(self) -> int:
        return len(self._live)

    def is_live(self, handle: ContentHandle) -> bool:
        return handle.uri in self._live

    def create(self, content: bytes, kind: str | None = None) -> ContentHandle:
        if self._temp_dir is not None:
            self._temp_dir.mkdir(parents=True, exist_ok=True)

        fd, path = tempfile.mkstemp(
            prefix=self._prefix,
            suffix=self.suffix_for(kind),
            dir=self._temp_dir,
        )
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)

        self._live.add(path)
        logger.debug(LogTemplates.HANDLE_CREATED, path)
        return ContentHandle(path)

    def revoke(self, handle: ContentHandle) -> None:
        if handle.uri not in self._live:
            return
        self._live.discard(handle.uri)
        try:
            handle.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(LogTemplates.HANDLE_REVOKE_FAILED, handle.uri, e)
            return
        logger.debug(LogTemplates.HANDLE_REVOKED, handle.uri)

    def revoke_all(self) -> int:
        """Revoke every live handle. Returns how many were revoked."""
        handles = [ContentHandle(uri) for uri in self._live]
        for handle in handles:
            self.revoke(handle)
        if handles:
            logger.info(LogTemplates.HANDLES_REVOKED_ALL, len(handles))
        return len(handles)

    @staticmethod
    def suffix_for(kind: str | None) -> str:
        """File suffix matching the MIME type *kind*, e.g. ``.mp3`` for ``audio/mpeg``."""
        if not kind:
            return MediaDefaults.FALLBACK_SUFFIX
        mime = kind.split(";", 1)[0].strip().lower()
        return mimetypes.guess_extension(mime) or MediaDefaults.FALLBACK_SUFFIX
