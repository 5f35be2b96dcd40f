"""Content checksum calculation for streamed artifacts.

Responsibilities:
- Compute a content digest for a byte stream while preserving its bytes.
- Make the digest available before downstream consumers read the stream, so
  the digest can shape the output filename without reading the input twice.
"""

from __future__ import annotations

import asyncio
from hashlib import sha1
from tempfile import SpooledTemporaryFile

from .streams import DEFAULT_CHUNK_SIZE, ByteStream

_SPOOL_MAX_MEMORY_BYTES = 4 * 1024 * 1024


class ChecksumCalculator:
    """Hash a byte stream and replay its bytes once the digest is known."""

    def __init__(self, spool_max_bytes: int = _SPOOL_MAX_MEMORY_BYTES) -> None:
        """Initialize the calculator with the in-memory buffering threshold."""

        self._spool_max_bytes = spool_max_bytes

    def transform(self, stream: ByteStream) -> tuple[ReplayStream, asyncio.Future[str]]:
        """Return a replay stream and a future resolving to the hex digest.

        The input is drained eagerly into a spool; the returned stream yields the
        original bytes only after the digest future has resolved. An input error
        fails the digest future and the replay stream alike. Callers that do not
        consume the replay stream must `aclose()` it to release the spool.
        """

        loop = asyncio.get_running_loop()
        digest: asyncio.Future[str] = loop.create_future()
        spool = SpooledTemporaryFile(max_size=self._spool_max_bytes)
        drain_task = loop.create_task(self._drain(stream, spool, digest))
        return ReplayStream(drain_task, spool, digest), digest

    @staticmethod
    async def _drain(
        stream: ByteStream,
        spool: SpooledTemporaryFile,
        digest: asyncio.Future[str],
    ) -> None:
        hasher = sha1()
        try:
            async for chunk in stream:
                hasher.update(chunk)
                spool.write(chunk)
        except Exception as exc:
            spool.close()
            if not digest.done():
                digest.set_exception(exc)
            return
        spool.seek(0)
        if not digest.done():
            digest.set_result(hasher.hexdigest())


class ReplayStream:
    """Async byte stream over a drained spool; the spool closes on exhaustion or `aclose()`."""

    def __init__(
        self,
        drain_task: asyncio.Task[None],
        spool: SpooledTemporaryFile,
        digest: asyncio.Future[str],
    ) -> None:
        self._drain_task = drain_task
        self._spool = spool
        self._digest = digest
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> ReplayStream:
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        await self._drain_task
        try:
            await self._digest
            chunk = self._spool.read(DEFAULT_CHUNK_SIZE)
        except BaseException:
            await self.aclose()
            raise
        if not chunk:
            await self.aclose()
            raise StopAsyncIteration
        return chunk

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._drain_task.done():
            self._drain_task.cancel()
        if not self._digest.done():
            self._digest.cancel()
        self._spool.close()
