"""Core datatypes exchanged between the writer and its callers.

Responsibilities:
- Represent the artifacts passed through the output stage.
- Carry per-call request context without ambient state.

Key types:
- `Bundle`, `RequestContext`, and `WriteResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


_STYLESHEET_CONTENT_TYPE = "text/css"


@dataclass(slots=True)
class Bundle:
    """An aggregated build artifact owned by the caller.

    The writer fills in `checksum`, `output_file`, and `url` in place; the same
    instance is returned from `FileWriter.write_bundle`.

    Attributes:
        name: Logical bundle name, used as filename when no path is known.
        content_type: MIME type of the bundle content.
        source_file: Source file of the bundle's single dependency, if any.
        relative_output_path: Explicit output path relative to the output root.
        slot: Named page slot used to disambiguate bundles with the same name.
        checksum: Content digest, assigned before the output path is resolved.
        checksums_enabled: Bundle-level checksum policy override.
        source_paths: Files whose modification times make up `last_modified`.
        output_file: Resolved output file, assigned when written or reused.
        url: Public URL, assigned only after the output file is complete.
    """

    name: str
    content_type: str
    source_file: Path | None = None
    relative_output_path: Path | None = None
    slot: str | None = None
    checksum: str | None = None
    checksums_enabled: bool | None = None
    source_paths: tuple[Path, ...] = field(default_factory=tuple)
    output_file: Path | None = None
    url: str | None = None

    def is_stylesheet(self) -> bool:
        """Return whether the bundle holds CSS content."""

        return self.content_type.split(";", 1)[0].strip().lower() == _STYLESHEET_CONTENT_TYPE


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Per-call context for URL derivation.

    Attributes:
        bundle: Bundle referencing the resource being written, if any.
        base_path: Directory that bundle URLs are made relative to.
    """

    bundle: Bundle | None = None
    base_path: Path | None = None


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of a resource write or reuse."""

    url: str
    output_file: Path
