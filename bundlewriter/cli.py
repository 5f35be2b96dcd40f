"""Command-line interface for bundlewriter.

Responsibilities:
- Expose user-facing commands that write resources and bundles.
- Convert CLI arguments and optional YAML defaults into `WriterConfig`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
import mimetypes
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_bundle,
    echo_error,
    echo_write_result,
    echo_write_summary,
    exit_with_command_error,
)
from .config import ConfigLoader, WriterConfig
from .errors import BundleWriterError, InvalidArgumentError
from .io.streams import concat_streams, iter_file
from .models.datatypes import Bundle, WriteResult
from .telemetry.logger import RunLogger
from .writers.file_writer import FileWriter

app = typer.Typer(
    name="bundlewriter",
    no_args_is_help=True,
    help="Write build bundles and resources to an output directory.",
)

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _load_yaml_config(config_path: Path | None) -> WriterConfig | None:
    """Load a YAML config file when requested and map failures to writer errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise InvalidArgumentError(
            f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    out: Path | None,
    url_prefix: str | None,
    checksums: bool | None,
    bundling_enabled: bool | None = None,
    include_slot_names: bool | None = None,
) -> WriterConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    config = _load_yaml_config(config_file) or WriterConfig()
    overrides: dict[str, object] = {}
    if out is not None:
        overrides["output_dir"] = out
    if url_prefix is not None:
        overrides["url_prefix"] = url_prefix
    if checksums is not None:
        overrides["checksums_enabled"] = checksums
    if bundling_enabled is not None:
        overrides["bundling_enabled"] = bundling_enabled
    if include_slot_names is not None:
        overrides["include_slot_names"] = include_slot_names
    resolved = replace(config, **overrides)
    try:
        resolved.validate()
    except ValueError as exc:
        raise InvalidArgumentError(str(exc)) from exc
    return resolved


async def _write_resources(
    writer: FileWriter, files: list[Path]
) -> list[WriteResult | BaseException]:
    """Write every resource concurrently, collecting failures per file."""

    return await asyncio.gather(
        *(writer.write_resource_file(path) for path in files),
        return_exceptions=True,
    )


async def _write_bundle(writer: FileWriter, bundle: Bundle, files: list[Path]) -> Bundle:
    """Reuse current bundle output or write the concatenated files."""

    if await writer.check_bundle_up_to_date(bundle):
        return bundle
    return await writer.write_bundle(concat_streams(iter_file(path) for path in files), bundle)


OutOption = Annotated[
    Path | None,
    typer.Option("--out", help="Output directory (overrides config file value)."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with writer defaults."),
]
UrlPrefixOption = Annotated[
    str | None,
    typer.Option("--url-prefix", help="URL prefix replacing the output directory in URLs."),
]
ChecksumsOption = Annotated[
    bool | None,
    typer.Option(
        "--checksums/--no-checksums",
        help="Embed content checksums in output filenames.",
    ),
]


@app.command("write")
def write_command(
    files: Annotated[list[Path], typer.Argument(help="Resource files to write.")],
    out: OutOption = None,
    config_file: ConfigOption = None,
    url_prefix: UrlPrefixOption = None,
    checksums: ChecksumsOption = None,
    unbundled: Annotated[
        bool,
        typer.Option(
            "--unbundled",
            help="Keep package-relative directory layout instead of flattening.",
        ),
    ] = False,
) -> None:
    """Write resource files, reusing output that is already up to date."""

    try:
        config = _resolve_command_config(
            config_file=config_file,
            out=out,
            url_prefix=url_prefix,
            checksums=checksums,
            bundling_enabled=False if unbundled else None,
        )
        writer = FileWriter(config, run_logger=RunLogger())
        outcomes = asyncio.run(_write_resources(writer, files))
    except (BundleWriterError, ValueError, OSError) as exc:
        exit_with_command_error("write", exc)

    failed = False
    for path, outcome in zip(files, outcomes):
        if isinstance(outcome, BaseException):
            echo_error(f"write `{path}`", outcome)
            failed = True
            continue
        echo_write_result(path, outcome)
    echo_write_summary(writer.stats)
    if failed:
        raise typer.Exit(code=1)


@app.command("bundle")
def bundle_command(
    files: Annotated[list[Path], typer.Argument(help="Files concatenated into the bundle.")],
    name: Annotated[str, typer.Option("--name", help="Logical bundle name.")],
    content_type: Annotated[
        str | None,
        typer.Option("--content-type", help="Bundle MIME type; guessed from the first file."),
    ] = None,
    slot: Annotated[str | None, typer.Option("--slot", help="Page slot name.")] = None,
    include_slot_names: Annotated[
        bool | None,
        typer.Option(
            "--include-slot-names/--no-include-slot-names",
            help="Embed the slot name in the output filename.",
        ),
    ] = None,
    out: OutOption = None,
    config_file: ConfigOption = None,
    url_prefix: UrlPrefixOption = None,
    checksums: ChecksumsOption = None,
) -> None:
    """Concatenate files into one bundle and write it."""

    try:
        config = _resolve_command_config(
            config_file=config_file,
            out=out,
            url_prefix=url_prefix,
            checksums=checksums,
            include_slot_names=include_slot_names,
        )
        resolved_content_type = (
            content_type or mimetypes.guess_type(files[0].name)[0] or _DEFAULT_CONTENT_TYPE
        )
        bundle = Bundle(
            name=name,
            content_type=resolved_content_type,
            slot=slot,
            source_paths=tuple(files),
        )
        writer = FileWriter(config, run_logger=RunLogger())
        asyncio.run(_write_bundle(writer, bundle, files))
    except (BundleWriterError, ValueError, OSError) as exc:
        exit_with_command_error("bundle", exc)

    echo_bundle(bundle)
    echo_write_summary(writer.stats)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
