"""Configuration model and loaders for the output writer.

Responsibilities:
- Define writer configuration as a typed dataclass fixed for one build run.
- Resolve the effective checksum policy for bundles and resources.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `WriterConfig`: normalized settings shared by every write in a run.
- `ConfigLoader`: static construction helpers for `WriterConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_int,
)


_DEFAULT_OUTPUT_DIR = Path("build")
_DEFAULT_CHECKSUM_LENGTH = 8


@dataclass(frozen=True, slots=True)
class WriterConfig:
    """Process-wide output settings for one build run.

    Attributes:
        output_dir: Output root; every resolved output file lies beneath it.
        checksums_enabled: Default checksum policy. `None` means enabled.
        url_prefix: Fixed URL prefix that replaces the output root in URLs.
        include_slot_names: Whether bundle slot names are embedded in filenames.
        checksum_length: Number of digest characters embedded in filenames.
        bundling_enabled: When disabled, resources keep their package-relative layout.
        project_root: Root package directory used for unbundled resource paths.
        base_path: Default base directory for relative bundle URLs.
    """

    output_dir: Path = _DEFAULT_OUTPUT_DIR
    checksums_enabled: bool | None = None
    url_prefix: str | None = None
    include_slot_names: bool = False
    checksum_length: int = _DEFAULT_CHECKSUM_LENGTH
    bundling_enabled: bool = True
    project_root: Path | None = None
    base_path: Path | None = None

    def validate(self) -> None:
        """Validate configuration values before any write is attempted."""

        if isinstance(self.checksum_length, bool) or self.checksum_length <= 0:
            raise ValueError("`checksum_length` must be a positive integer.")
        if self.url_prefix is not None and normalize_optional_string(self.url_prefix) is None:
            raise ValueError("`url_prefix` must be a non-empty string when provided.")

    def resolved(self, cwd: Path | None = None) -> WriterConfig:
        """Return a copy with absolute output, project, and base directories."""

        working_dir = Path.cwd() if cwd is None else cwd
        output_dir = Path(os.path.abspath(working_dir / self.output_dir))
        project_root = Path(os.path.abspath(working_dir / (self.project_root or Path("."))))
        base_path = None
        if self.base_path is not None:
            base_path = Path(os.path.abspath(working_dir / self.base_path))
        return replace(
            self,
            output_dir=output_dir,
            project_root=project_root,
            base_path=base_path,
        )

    def checksums_for_bundle(self, bundle_override: bool | None) -> bool:
        """Return whether a bundle write computes a checksum.

        A bundle-level setting wins over the writer default; with both unset
        checksums are enabled.
        """

        if bundle_override is not None:
            return bundle_override
        return self.checksums_enabled is not False

    def checksums_for_resources(self) -> bool:
        """Return whether resource writes compute a checksum."""

        return self.checksums_enabled is not False


class ConfigLoader:
    """Factory methods for creating `WriterConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "output_dir",
            "checksums_enabled",
            "url_prefix",
            "include_slot_names",
            "checksum_length",
            "bundling_enabled",
            "project_root",
            "base_path",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> WriterConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> WriterConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        output_dir = (
            ConfigLoader._optional_env_path(env_map, "BUNDLEWRITER_OUTPUT_DIR")
            or _DEFAULT_OUTPUT_DIR
        )
        checksums_enabled = ConfigLoader._optional_env_boolean(env_map, "BUNDLEWRITER_CHECKSUMS")
        url_prefix = ConfigLoader._optional_env_string(env_map, "BUNDLEWRITER_URL_PREFIX")
        include_slot_names = (
            ConfigLoader._optional_env_boolean(env_map, "BUNDLEWRITER_INCLUDE_SLOT_NAMES")
            or False
        )
        checksum_length = ConfigLoader._optional_env_positive_int(
            env_map, "BUNDLEWRITER_CHECKSUM_LENGTH"
        ) or _DEFAULT_CHECKSUM_LENGTH
        bundling_enabled = ConfigLoader._optional_env_boolean(env_map, "BUNDLEWRITER_BUNDLING")
        project_root = ConfigLoader._optional_env_path(env_map, "BUNDLEWRITER_PROJECT_ROOT")
        base_path = ConfigLoader._optional_env_path(env_map, "BUNDLEWRITER_BASE_PATH")

        config = WriterConfig(
            output_dir=output_dir,
            checksums_enabled=checksums_enabled,
            url_prefix=url_prefix,
            include_slot_names=include_slot_names,
            checksum_length=checksum_length,
            bundling_enabled=True if bundling_enabled is None else bundling_enabled,
            project_root=project_root,
            base_path=base_path,
        )
        config.validate()
        return config

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> WriterConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        output_dir = ConfigLoader._optional_path(payload, "output_dir") or _DEFAULT_OUTPUT_DIR
        checksums_enabled = ConfigLoader._optional_boolean(
            payload, "checksums_enabled", source_label
        )
        include_slot_names = ConfigLoader._optional_boolean(
            payload, "include_slot_names", source_label
        )
        bundling_enabled = ConfigLoader._optional_boolean(payload, "bundling_enabled", source_label)
        checksum_length = _DEFAULT_CHECKSUM_LENGTH
        if "checksum_length" in payload:
            try:
                checksum_length = parse_positive_int(payload["checksum_length"], "checksum_length")
            except ValueError as exc:
                raise ValueError(f"{source_label} field {exc}") from exc

        config = WriterConfig(
            output_dir=output_dir,
            checksums_enabled=checksums_enabled,
            url_prefix=normalize_optional_string(payload.get("url_prefix")),
            include_slot_names=bool(include_slot_names),
            checksum_length=checksum_length,
            bundling_enabled=True if bundling_enabled is None else bundling_enabled,
            project_root=ConfigLoader._optional_path(payload, "project_root"),
            base_path=ConfigLoader._optional_path(payload, "base_path"),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str) -> Path | None:
        """Read an optional path field and normalize blank values to `None`."""

        value = normalize_optional_string(payload.get(key))
        if value is None:
            return None
        return Path(value)

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> bool | None:
        """Read and validate an optional boolean field from a payload."""

        if key not in payload or payload[key] is None:
            return None

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_env_path(env: Mapping[str, str], key: str) -> Path | None:
        """Read an optional path value from environment mapping."""

        value = ConfigLoader._optional_env_string(env, key)
        if value is None:
            return None
        return Path(value)

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional positive integer from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            return parse_positive_int(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable {exc}") from exc

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        parsed = parse_permissive_boolean(raw_value)
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
