"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundlewriter.config import ConfigLoader, WriterConfig


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "bundlewriter.yml"
    config_path.write_text(
        """
output_dir: " dist "
checksums_enabled: " no "
url_prefix: " https://cdn.example.com/assets/ "
include_slot_names: yes
checksum_length: " 12 "
bundling_enabled: false
project_root: " . "
base_path: "   "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config == WriterConfig(
        output_dir=Path("dist"),
        checksums_enabled=False,
        url_prefix="https://cdn.example.com/assets/",
        include_slot_names=True,
        checksum_length=12,
        bundling_enabled=False,
        project_root=Path("."),
        base_path=None,
    )


def test_config_loader_from_yaml_defaults_for_empty_file(tmp_path: Path) -> None:
    """An empty YAML file yields the default config."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    assert ConfigLoader.from_yaml(config_path) == WriterConfig()


def test_config_loader_from_yaml_rejects_unknown_keys_and_invalid_values(
    tmp_path: Path,
) -> None:
    """YAML loader should fail clearly on unknown fields and invalid typed values."""

    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text("output_dir: out\nminify: true\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"unsupported key\(s\): minify"):
        ConfigLoader.from_yaml(unknown_path)

    invalid_bool_path = tmp_path / "invalid-bool.yml"
    invalid_bool_path.write_text("checksums_enabled: maybe\n", encoding="utf-8")
    with pytest.raises(ValueError, match="`checksums_enabled` must be a boolean"):
        ConfigLoader.from_yaml(invalid_bool_path)

    invalid_int_path = tmp_path / "invalid-int.yml"
    invalid_int_path.write_text("checksum_length: 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="`checksum_length` must be a positive integer"):
        ConfigLoader.from_yaml(invalid_int_path)

    list_path = tmp_path / "list.yml"
    list_path.write_text("- output_dir\n", encoding="utf-8")
    with pytest.raises(ValueError, match="top-level mapping"):
        ConfigLoader.from_yaml(list_path)


def test_config_loader_from_env_loads_values_and_normalizes_blanks() -> None:
    """Environment loader should parse writer keys and normalize blank strings."""

    config = ConfigLoader.from_env(
        {
            "BUNDLEWRITER_OUTPUT_DIR": " static ",
            "BUNDLEWRITER_CHECKSUMS": " on ",
            "BUNDLEWRITER_URL_PREFIX": "   ",
            "BUNDLEWRITER_INCLUDE_SLOT_NAMES": "1",
            "BUNDLEWRITER_CHECKSUM_LENGTH": "10",
            "BUNDLEWRITER_BUNDLING": "off",
            "BUNDLEWRITER_BASE_PATH": "/srv/www",
        }
    )

    assert config.output_dir == Path("static")
    assert config.checksums_enabled is True
    assert config.url_prefix is None
    assert config.include_slot_names is True
    assert config.checksum_length == 10
    assert config.bundling_enabled is False
    assert config.project_root is None
    assert config.base_path == Path("/srv/www")


def test_config_loader_from_env_rejects_invalid_values() -> None:
    """Environment loader should fail clearly for invalid boolean and integer values."""

    with pytest.raises(ValueError, match="`BUNDLEWRITER_CHECKSUMS` must be a boolean"):
        ConfigLoader.from_env({"BUNDLEWRITER_CHECKSUMS": "sometimes"})
    with pytest.raises(ValueError, match="`BUNDLEWRITER_CHECKSUM_LENGTH` must be a positive"):
        ConfigLoader.from_env({"BUNDLEWRITER_CHECKSUM_LENGTH": "-3"})


def test_checksum_policy_prefers_bundle_override_and_defaults_to_enabled() -> None:
    """Bundle settings beat the writer default; both unset means enabled."""

    assert WriterConfig().checksums_for_bundle(None) is True
    assert WriterConfig(checksums_enabled=False).checksums_for_bundle(None) is False
    assert WriterConfig(checksums_enabled=False).checksums_for_bundle(True) is True
    assert WriterConfig(checksums_enabled=True).checksums_for_bundle(False) is False
    assert WriterConfig().checksums_for_resources() is True
    assert WriterConfig(checksums_enabled=False).checksums_for_resources() is False


def test_resolved_config_makes_directories_absolute(tmp_path: Path) -> None:
    """Relative output, project, and base directories resolve against the working dir."""

    resolved = WriterConfig(base_path=Path("site")).resolved(cwd=tmp_path)

    assert resolved.output_dir == tmp_path / "build"
    assert resolved.project_root == tmp_path
    assert resolved.base_path == tmp_path / "site"


def test_validate_rejects_blank_prefix_and_bad_checksum_length() -> None:
    """Programmatic configs are validated like loaded ones."""

    with pytest.raises(ValueError, match="`url_prefix` must be a non-empty string"):
        WriterConfig(url_prefix="  ").validate()
    with pytest.raises(ValueError, match="`checksum_length` must be a positive integer"):
        WriterConfig(checksum_length=0).validate()
