"""Filesystem access for output files.

Responsibilities:
- Report modification times, mapping missing or unreadable paths to "unknown".
- Create parent directories and stream bytes into output files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from .streams import ByteStream

UNKNOWN_MTIME = -1.0


class OutputStore:
    """Filesystem-backed target for streamed artifact writes."""

    async def last_modified(self, path: Path) -> float:
        """Return the modification time of `path`, or `UNKNOWN_MTIME` if it cannot be read."""

        try:
            stat_result = await asyncio.to_thread(path.stat)
        except OSError as exc:
            logger.debug("No modification time for {}: {}", path, exc)
            return UNKNOWN_MTIME
        return stat_result.st_mtime

    async def ensure_parent(self, path: Path) -> None:
        """Create the directory that will contain `path`."""

        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)

    async def write_stream(self, path: Path, stream: ByteStream) -> int:
        """Write every chunk of `stream` to `path` and return the byte count.

        The method returns only after the file handle is flushed and closed.
        Errors from the stream or the file propagate unchanged.
        """

        await self.ensure_parent(path)
        handle = await asyncio.to_thread(path.open, "wb")
        written = 0
        try:
            async for chunk in stream:
                await asyncio.to_thread(handle.write, chunk)
                written += len(chunk)
        finally:
            await asyncio.to_thread(handle.close)
        return written
