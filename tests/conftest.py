"""Shared pytest fixtures for the full bundlewriter test suite."""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path

import pytest

from bundlewriter.config import WriterConfig


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Provide an output root inside the per-test temporary directory."""

    return tmp_path / "build"


@pytest.fixture
def plain_config(output_dir: Path) -> WriterConfig:
    """Provide a config with checksums disabled so filenames stay predictable."""

    return WriterConfig(output_dir=output_dir, checksums_enabled=False)


@pytest.fixture
def write_file_at() -> Callable[[Path, str, float], Path]:
    """Provide a helper that writes text to a file and pins its modification time."""

    def _write(path: Path, content: str, mtime: float) -> Path:
        """Create `path` with `content` and set its mtime to `mtime` seconds."""

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path

    return _write
