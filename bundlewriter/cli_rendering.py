"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
per-artifact write results, and run summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .errors import BundleWriterError
from .models.datatypes import Bundle, WriteResult
from .telemetry.stats import WriteStats


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    echo_error(command_name, exc)
    raise typer.Exit(code=1) from exc


def echo_error(label: str, exc: BaseException) -> None:
    """Print one failure line and an optional hint to stderr."""

    if isinstance(exc, BundleWriterError):
        typer.secho(f"{label} failed: {exc.detail}", fg=typer.colors.RED, err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{label} failed: {exc}", fg=typer.colors.RED, err=True)


def echo_write_result(source: Path, result: WriteResult) -> None:
    """Print the URL and output file for one written resource."""

    typer.echo(f"{source}: {result.url} -> {result.output_file}")


def echo_bundle(bundle: Bundle) -> None:
    """Print the assigned output details of a bundle."""

    typer.echo(f"Bundle: {bundle.name}")
    typer.echo(f"URL: {bundle.url}")
    typer.echo(f"Output: {bundle.output_file}")
    typer.echo(f"Checksum: {bundle.checksum or '(none)'}")


def echo_write_summary(stats: WriteStats) -> None:
    """Print run-level write counters."""

    summary = stats.summary()
    typer.echo(
        "Written: {written}, reused: {reused}, failed: {failed}, bytes: {bytes_written}".format(
            **summary
        )
    )
