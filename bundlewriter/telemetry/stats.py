"""Write accounting for one build run.

Responsibilities:
- Count written, reused, and failed artifacts and bytes written.
- Provide summary output for CLI reporting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class WriteStats:
    """Collect and summarize run-level write counters."""

    written: int = 0
    reused: int = 0
    failed: int = 0
    bytes_written: int = 0

    def add_written(self, byte_count: int) -> None:
        """Record one completed write of `byte_count` bytes."""

        self.written += 1
        self.bytes_written += max(0, byte_count)

    def add_reused(self) -> None:
        """Record one artifact served from existing output."""

        self.reused += 1

    def add_failed(self) -> None:
        """Record one failed write."""

        self.failed += 1

    def summary(self) -> dict[str, int]:
        """Return a summary dictionary for reporting."""

        return {
            "written": self.written,
            "reused": self.reused,
            "failed": self.failed,
            "bytes_written": self.bytes_written,
        }
