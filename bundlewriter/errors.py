"""Domain exceptions for output resolution, writing, and CLI diagnostics."""

from __future__ import annotations

from pathlib import Path


class BundleWriterError(RuntimeError):
    """Base error for failures surfaced by the output stage."""

    def __init__(self, detail: str, *, hint: str | None = None) -> None:
        """Initialize an error with a user-facing detail and optional hint."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class InvalidArgumentError(BundleWriterError, ValueError):
    """Raised when a required identity, path, or stream is missing or invalid."""


class StreamFailureError(BundleWriterError):
    """Raised when the input stream or the output write target fails mid-write."""

    def __init__(
        self,
        detail: str,
        *,
        output_file: Path | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a stream failure bound to an optional output file."""

        super().__init__(detail, hint=hint)
        self.output_file = output_file


class PreconditionViolationError(BundleWriterError, AssertionError):
    """Raised when URL derivation is asked to resolve a path outside the output root."""
