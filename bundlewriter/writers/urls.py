"""Public URL derivation for written output files.

Resolution order for `UrlDeriver.url_for`, first match wins:
1. A stylesheet bundle in the request context: URL relative to that bundle's
   output directory, so CSS can reference its assets portably.
2. A configured URL prefix: the output root is replaced by the prefix.
3. Otherwise the URL mirrors the layout below the output root's parent.

`UrlDeriver.bundle_url` adds one step before the last: a base path (request
context first, then config) makes bundle URLs relative to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..config import WriterConfig
from ..errors import PreconditionViolationError
from ..models.datatypes import Bundle, RequestContext
from .paths import OutputPathResolver, is_within


def _to_url_path(path: str) -> str:
    return path.replace("\\", "/")


class UrlDeriver:
    """Map output files beneath the output root to public URLs."""

    def __init__(self, config: WriterConfig, resolver: OutputPathResolver) -> None:
        """Bind the deriver to a resolved config and the matching path resolver."""

        self._config = config
        self._resolver = resolver
        self._output_dir = str(config.output_dir)

    def url_for(self, output_file: Path, context: RequestContext | None = None) -> str:
        """Return the public URL for an output file.

        Raises:
            PreconditionViolationError: If `output_file` is outside the output root.
        """

        path = self._checked_path(output_file)
        url = self._stylesheet_or_prefix_url(path, context)
        if url is not None:
            return url
        return self._parent_relative_url(path)

    def bundle_url(self, bundle: Bundle, context: RequestContext | None = None) -> str:
        """Return the URL for a bundle whose output file is already assigned.

        Raises:
            PreconditionViolationError: If the bundle has no output file or it
                lies outside the output root.
        """

        if bundle.output_file is None:
            raise PreconditionViolationError(
                f"Bundle `{bundle.name}` has no output file; resolve it before deriving a URL."
            )
        path = self._checked_path(bundle.output_file)
        url = self._stylesheet_or_prefix_url(path, context)
        if url is not None:
            return url

        base_path = self._config.base_path
        if context is not None and context.base_path is not None:
            base_path = context.base_path
        if base_path is not None:
            return _to_url_path(os.path.relpath(path, str(base_path)))

        return self._parent_relative_url(path)

    def _checked_path(self, output_file: Path) -> str:
        path = os.path.normpath(str(output_file))
        if not is_within(path, self._output_dir):
            raise PreconditionViolationError(
                f"Output file `{output_file}` expected to be in the output directory "
                f"`{self._output_dir}`."
            )
        return path

    def _stylesheet_or_prefix_url(self, path: str, context: RequestContext | None) -> str | None:
        if context is not None and context.bundle is not None and context.bundle.is_stylesheet():
            stylesheet_dir = os.path.dirname(self._stylesheet_output(context.bundle))
            return _to_url_path(os.path.relpath(path, stylesheet_dir))

        url_prefix = self._config.url_prefix
        if url_prefix:
            remainder = os.path.relpath(path, self._output_dir)
            if remainder == os.curdir:
                return url_prefix.rstrip("/")
            return url_prefix.rstrip("/") + "/" + _to_url_path(remainder)
        return None

    def _parent_relative_url(self, path: str) -> str:
        parent_dir = os.path.dirname(self._output_dir)
        return _to_url_path(path[len(parent_dir.rstrip(os.sep)):])

    def _stylesheet_output(self, bundle: Bundle) -> str:
        if bundle.output_file is not None:
            return str(bundle.output_file)
        return str(self._resolver.for_bundle(bundle))
