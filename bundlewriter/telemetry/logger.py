"""Structured write logging utilities.

Responsibilities:
- Emit concise, deterministic per-artifact write events through `loguru`.
- Keep log lines free of content payloads.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic write events for CLI-observable output activity."""

    def __init__(self, sink: TextIO | None = None) -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level="INFO", colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[write] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_write_start(self, stage: str, artifact: str) -> None:
        """Emit a write-start event for one artifact."""

        self._emit("INFO", "start", stage, artifact=artifact)

    def log_write_complete(self, stage: str, artifact: str, output_file: object) -> None:
        """Emit a write-complete event with the final output file."""

        self._emit("INFO", "complete", stage, artifact=artifact, output=output_file)

    def log_reuse(self, artifact: str, output_file: object) -> None:
        """Emit an event for output reused without rewriting."""

        self._emit("INFO", "reuse", "reuse", artifact=artifact, output=output_file)

    def log_write_failure(self, stage: str, artifact: str, error_type: str) -> None:
        """Emit a write-failure event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, artifact=artifact, error_type=error_type)
