"""Package root lookup for unbundled resources.

Responsibilities:
- Find the nearest enclosing package (a directory with `package.json`).
- Compute the package-relative output path that keeps resource layout stable.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

_PACKAGE_MANIFEST_NAME = "package.json"


@dataclass(frozen=True, slots=True)
class PackageRoot:
    """A package directory and its manifest identity."""

    directory: Path
    name: str
    version: str


def find_package_root(directory: Path) -> PackageRoot | None:
    """Return the nearest package enclosing `directory`, searching upwards."""

    for candidate in (directory, *directory.parents):
        manifest_path = candidate / _PACKAGE_MANIFEST_NAME
        if not manifest_path.is_file():
            continue
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Package manifest `{manifest_path}` must contain a JSON object.")
        return PackageRoot(
            directory=candidate,
            name=str(payload.get("name") or candidate.name),
            version=str(payload.get("version") or "0.0.0"),
        )
    return None


def package_relative_path(path: Path, project_root: Path) -> Path:
    """Return the output path for an unbundled resource.

    Files inside the project package stay relative to it; files inside other
    packages are prefixed with `<name>-<version>`; files outside any package
    keep their full path.
    """

    package = find_package_root(path.parent)
    if package is None:
        return path

    relative = path.relative_to(package.directory)
    if package.directory == project_root:
        return relative
    return Path(f"{package.name}-{package.version}") / relative
