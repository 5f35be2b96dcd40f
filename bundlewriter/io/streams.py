"""Async byte stream helpers.

Responsibilities:
- Normalize in-memory content, sync iterables, and async iterables into one
  async byte stream type consumed by the writer.
- Read files as async chunked streams without blocking the event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from pathlib import Path
from typing import Union

from ..errors import InvalidArgumentError

ByteStream = AsyncIterator[bytes]
StreamSource = Union[
    bytes,
    bytearray,
    str,
    Iterable[Union[bytes, str]],
    AsyncIterable[Union[bytes, str]],
]

DEFAULT_CHUNK_SIZE = 64 * 1024


def encode_chunk(chunk: bytes | bytearray | str) -> bytes:
    """Return chunk bytes, encoding text chunks as UTF-8."""

    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


def as_byte_stream(source: StreamSource | None) -> ByteStream:
    """Wrap a supported content source as an async byte stream.

    Raises:
        InvalidArgumentError: If `source` is missing or of an unsupported type.
    """

    if source is None:
        raise InvalidArgumentError('"input" is required')
    if isinstance(source, (bytes, bytearray, str)):
        return _iter_single(encode_chunk(source))
    if isinstance(source, AsyncIterable):
        return _iter_async(source)
    if isinstance(source, Iterable):
        return _iter_sync(source)
    raise InvalidArgumentError(f"Unsupported input stream type `{type(source).__name__}`.")


async def iter_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ByteStream:
    """Yield file content in chunks, reading off the event loop thread."""

    handle = await asyncio.to_thread(path.open, "rb")
    try:
        while True:
            chunk = await asyncio.to_thread(handle.read, chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        await asyncio.to_thread(handle.close)


async def concat_streams(streams: Iterable[ByteStream]) -> ByteStream:
    """Yield every chunk of each stream in order."""

    for stream in streams:
        async for chunk in stream:
            yield chunk


async def _iter_single(data: bytes) -> ByteStream:
    if data:
        yield data


async def _iter_sync(source: Iterable[bytes | str]) -> ByteStream:
    for chunk in source:
        yield encode_chunk(chunk)


async def _iter_async(source: AsyncIterable[bytes | str]) -> ByteStream:
    async for chunk in source:
        yield encode_chunk(chunk)
