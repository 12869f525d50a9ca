"""Duration probing through the ``ffprobe`` command line tool."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from pydantic import ValidationError

from aerobic_player.application.interfaces.content import DurationProbe
from aerobic_player.domain.shared.constants import MediaDefaults
from aerobic_player.domain.shared.exceptions import MetadataError
from aerobic_player.domain.shared.messages import ErrorMessages, LogTemplates
from aerobic_player.infrastructure.audio.models import FFprobeOutput

if TYPE_CHECKING:
    from aerobic_player.application.interfaces.content import ContentHandleFactory

logger = logging.getLogger(__name__)


class FFprobeDurationProbe(DurationProbe):
    """Reads media durations by running ``ffprobe`` on a temporary file."""

    def __init__(
        self,
        handle_factory: ContentHandleFactory,
        *,
        ffprobe_path: str = MediaDefaults.FFPROBE_PATH,
        timeout: float = MediaDefaults.PROBE_TIMEOUT_SECONDS,
    ) -> None:
        self._handles = handle_factory
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    async def probe(self, content: bytes, kind: str | None = None) -> float:
        handle = self._handles.create(content, kind)
        try:
            return await self.probe_path(handle.uri)
        finally:
            self._handles.revoke(handle)

    async def probe_path(self, path: str) -> float:
        """Return the duration of the media file at *path* in seconds.

        Raises:
            MetadataError: If ffprobe cannot be run, fails, times out or
                reports no duration.
        """
        logger.debug(LogTemplates.PROBE_RUNNING, path)
        try:
            process = await asyncio.create_subprocess_exec(
                self._ffprobe_path,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "json",
                path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(LogTemplates.PROBE_FAILED, path, e)
            raise MetadataError(path, str(e)) from e

        try:
            async with asyncio.timeout(self._timeout):
                stdout, stderr = await process.communicate()
        except TimeoutError as e:
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            message = ErrorMessages.PROBE_TIMEOUT.format(timeout=self._timeout)
            logger.warning(LogTemplates.PROBE_FAILED, path, message)
            raise MetadataError(path, message) from e

        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            logger.warning(LogTemplates.PROBE_FAILED, path, detail or process.returncode)
            raise MetadataError(
                path, ErrorMessages.PROBE_EXIT_CODE.format(code=process.returncode)
            )

        return self._parse_duration(stdout, path)

    def _parse_duration(self, stdout: bytes, path: str) -> float:
        try:
            output = FFprobeOutput.model_validate_json(stdout or b"{}")
        except ValidationError as e:
            logger.warning(LogTemplates.PROBE_FAILED, path, e)
            raise MetadataError(path, ErrorMessages.PROBE_EMPTY_OUTPUT) from e

        if output.format.duration is None:
            raise MetadataError(path, ErrorMessages.PROBE_EMPTY_OUTPUT)
        return output.format.duration
