"""CLI tests for resource and bundle write commands."""

from __future__ import annotations

from hashlib import sha1
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from bundlewriter.cli import app


def test_write_command_writes_resources_and_reports_urls(tmp_path: Path) -> None:
    """Write command should print one URL line per file and a run summary."""

    logo = tmp_path / "img" / "logo.png"
    logo.parent.mkdir()
    logo.write_bytes(b"\x89PNG")
    out_dir = tmp_path / "public"

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["write", str(logo), "--out", str(out_dir), "--url-prefix", "/static/"],
    )

    digest = sha1(b"\x89PNG").hexdigest()[:8]
    assert result.exit_code == 0, result.output
    assert f"/static/logo-{digest}.png" in result.output
    assert (out_dir / f"logo-{digest}.png").read_bytes() == b"\x89PNG"
    assert "Written: 1, reused: 0, failed: 0, bytes: 4" in result.output


def test_write_command_reuses_current_output_without_checksums(tmp_path: Path) -> None:
    """A second run with checksums disabled reuses the existing output file."""

    script = tmp_path / "vendor.js"
    script.write_text("var a = 1;", encoding="utf-8")
    os.utime(script, (1_000, 1_000))
    out_dir = tmp_path / "public"
    arguments = ["write", str(script), "--out", str(out_dir), "--no-checksums"]

    runner = CliRunner()
    first = runner.invoke(app, arguments)
    second = runner.invoke(app, arguments)

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "Written: 0, reused: 1, failed: 0, bytes: 0" in second.output


def test_write_command_reports_failed_file_and_exits_nonzero(tmp_path: Path) -> None:
    """A missing input fails its own write while other files still complete."""

    present = tmp_path / "ok.txt"
    present.write_text("ok", encoding="utf-8")
    out_dir = tmp_path / "public"

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["write", str(present), str(tmp_path / "missing.txt"), "--out", str(out_dir)],
    )

    assert result.exit_code == 1
    assert "missing.txt` failed:" in result.output
    assert "Written: 1, reused: 0, failed: 1" in result.output


def test_write_command_reports_missing_config_file(tmp_path: Path) -> None:
    """Write should render config errors as a command failure with a hint."""

    source = tmp_path / "a.js"
    source.write_text("1;", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["write", str(source), "--config", "missing-bundlewriter.yaml"])

    assert result.exit_code == 1
    assert "write failed: Config file not found: `missing-bundlewriter.yaml`." in result.output


def test_write_command_does_not_mask_programming_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Errors outside the writer taxonomy propagate instead of being rendered."""

    source = tmp_path / "a.js"
    source.write_text("1;", encoding="utf-8")

    def broken_writer(*args: object, **kwargs: object) -> None:
        raise RuntimeError("writer construction bug")

    monkeypatch.setattr("bundlewriter.cli.FileWriter", broken_writer)

    runner = CliRunner()
    result = runner.invoke(app, ["write", str(source), "--out", str(tmp_path / "public")])

    assert isinstance(result.exception, RuntimeError)
    assert "write failed:" not in result.output


def test_bundle_command_concatenates_files_with_slot_name(tmp_path: Path) -> None:
    """Bundle command should concatenate inputs and honour slot naming flags."""

    first = tmp_path / "a.css"
    second = tmp_path / "b.css"
    first.write_text("a{}", encoding="utf-8")
    second.write_text("b{}", encoding="utf-8")
    out_dir = tmp_path / "public"

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "bundle",
            str(first),
            str(second),
            "--name",
            "site",
            "--slot",
            "head",
            "--include-slot-names",
            "--no-checksums",
            "--out",
            str(out_dir),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (out_dir / "site-head.css").read_text(encoding="utf-8") == "a{}b{}"
    assert "URL: /public/site-head.css" in result.output
    assert "Checksum: (none)" in result.output


def test_bundle_command_reports_missing_config_file(tmp_path: Path) -> None:
    """Bundle should fail with diagnostics when `--config` path is missing."""

    source = tmp_path / "a.js"
    source.write_text("1;", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["bundle", str(source), "--name", "app", "--config", "missing-bundlewriter.yaml"],
    )

    assert result.exit_code == 1
    assert "bundle failed: Config file not found: `missing-bundlewriter.yaml`." in result.output
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in result.output
