"""Unit tests for the output store and async byte stream helpers."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from bundlewriter.errors import InvalidArgumentError
from bundlewriter.io.storage import UNKNOWN_MTIME, OutputStore
from bundlewriter.io.streams import as_byte_stream, concat_streams, iter_file


def test_output_store_writes_stream_and_reports_mtime(tmp_path: Path) -> None:
    store = OutputStore()
    target = tmp_path / "nested" / "dir" / "app.js"

    written = asyncio.run(store.write_stream(target, as_byte_stream(["a", b"b", "č"])))

    assert written == 4
    assert target.read_bytes() == "abč".encode("utf-8")
    assert asyncio.run(store.last_modified(target)) == target.stat().st_mtime
    assert asyncio.run(store.last_modified(tmp_path / "missing.js")) == UNKNOWN_MTIME


def test_iter_file_and_concat_streams_preserve_order(tmp_path: Path) -> None:
    first = tmp_path / "one.txt"
    second = tmp_path / "two.txt"
    first.write_bytes(b"0123456789")
    second.write_bytes(b"abc")
    target = tmp_path / "out.txt"

    stream = concat_streams([iter_file(first, chunk_size=3), iter_file(second)])
    asyncio.run(OutputStore().write_stream(target, stream))

    assert target.read_bytes() == b"0123456789abc"


def test_as_byte_stream_rejects_missing_and_unsupported_sources() -> None:
    with pytest.raises(InvalidArgumentError, match='"input" is required'):
        as_byte_stream(None)
    with pytest.raises(InvalidArgumentError, match="Unsupported input stream type `int`"):
        as_byte_stream(42)  # type: ignore[arg-type]
