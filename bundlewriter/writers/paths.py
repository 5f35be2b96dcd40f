"""Output path resolution for bundles and resources.

Responsibilities:
- Map an artifact identity to a concrete file beneath the output root.
- Sanitize filenames, embed truncated checksums and slot names, and apply
  target extensions derived from content types.

Key public types:
- `OutputPathResolver`: deterministic path mapping bound to one `WriterConfig`.
"""

from __future__ import annotations

import mimetypes
import os
from pathlib import Path
import re

from ..config import WriterConfig
from ..errors import InvalidArgumentError
from ..io.packages import package_relative_path
from ..models.datatypes import Bundle

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")
_LEADING_SEPARATORS = "/\\"

_CONTENT_TYPE_EXTENSIONS = {
    "application/javascript": "js",
    "application/x-javascript": "js",
    "text/javascript": "js",
    "text/css": "css",
    "text/html": "html",
    "application/json": "json",
    "image/jpeg": "jpg",
    "image/svg+xml": "svg",
}


def extension_for_content_type(content_type: str | None) -> str | None:
    """Return the canonical file extension (without dot) for a MIME type."""

    if not content_type:
        return None
    mime_type = content_type.split(";", 1)[0].strip().lower()
    if mime_type in _CONTENT_TYPE_EXTENSIONS:
        return _CONTENT_TYPE_EXTENSIONS[mime_type]
    suffix = mimetypes.guess_extension(mime_type, strict=False)
    if suffix is None:
        return None
    return suffix.lstrip(".")


def sanitize_filename(filename: str) -> str:
    """Strip one leading separator and replace characters outside `[A-Za-z0-9_.-]`."""

    if filename[:1] in _LEADING_SEPARATORS:
        filename = filename[1:]
    return _UNSAFE_FILENAME_CHARS.sub("-", filename)


def split_extension(basename: str) -> tuple[str, str]:
    """Split a basename at its last dot into `(name, extension)`."""

    name, dot, ext = basename.rpartition(".")
    if not dot:
        return basename, ""
    return name, ext


class OutputPathResolver:
    """Resolve output files beneath the configured output root."""

    def __init__(self, config: WriterConfig) -> None:
        """Bind the resolver to a config whose directories are already absolute."""

        self._config = config
        self._output_dir = str(config.output_dir)

    def resolve(
        self,
        relative_path: Path | str | None,
        filename: str | None,
        checksum: str | None = None,
        target_ext: str | None = None,
        slot_name: str | None = None,
    ) -> Path:
        """Return the absolute output file for an artifact identity.

        Output files are named `name[-checksum][-slot][.ext][.target_ext]`. The
        target extension is appended, not substituted, when it differs from
        the original extension.

        Raises:
            InvalidArgumentError: If neither a relative path nor a filename is
                given, or the result would fall outside the output root.
        """

        relative_text = str(relative_path) if relative_path else ""
        if relative_text:
            output_path = self._join(relative_text.lstrip(_LEADING_SEPARATORS))
        else:
            if not filename:
                raise InvalidArgumentError('"filename" or "sourceFile" expected')
            output_path = self._join(sanitize_filename(filename))

        dirname, basename = os.path.split(output_path)
        name, ext = split_extension(basename)

        if checksum:
            length = self._config.checksum_length
            if length and len(checksum) > length:
                checksum = checksum[:length]
            name += f"-{checksum}"

        if self._config.include_slot_names and slot_name:
            name += f"-{slot_name}"

        basename = name
        if ext:
            basename += f".{ext}"
        if target_ext and ext != target_ext:
            basename += f".{target_ext}"

        return Path(dirname) / basename

    def for_bundle(self, bundle: Bundle) -> Path:
        """Resolve the output file for a bundle from its current identity."""

        relative_path = bundle.source_file or bundle.relative_output_path
        return self.resolve(
            relative_path,
            bundle.name,
            bundle.checksum,
            extension_for_content_type(bundle.content_type),
            bundle.slot,
        )

    def for_resource(self, path: Path, checksum: str | None = None) -> Path:
        """Resolve the output file for a single resource file.

        With bundling enabled resources are flattened to their basename;
        otherwise their package-relative layout is kept.
        """

        relative_path: Path | None = None
        if not self._config.bundling_enabled:
            project_root = self._config.project_root or Path.cwd()
            relative_path = package_relative_path(path, project_root)
        return self.resolve(relative_path, path.name, checksum)

    def _join(self, relative: str) -> str:
        candidate = os.path.normpath(os.path.join(self._output_dir, relative))
        if candidate == self._output_dir or not is_within(candidate, self._output_dir):
            raise InvalidArgumentError(
                f"Output path `{relative}` escapes the output directory `{self._output_dir}`.",
                hint="Use a path that stays beneath the configured output directory.",
            )
        return candidate


def is_within(path: str, root: str) -> bool:
    """Return whether `path` equals `root` or lies beneath it."""

    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        return False
