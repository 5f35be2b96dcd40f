"""Reuse checks that let up-to-date output skip a rewrite.

Responsibilities:
- Compare source and output modification times concurrently.
- Treat missing or unreadable files as "unknown", which always leads to a
  fresh write.
- Skip the check entirely when checksums decide the output filename.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from ..config import WriterConfig
from ..io.storage import UNKNOWN_MTIME, OutputStore
from ..models.datatypes import Bundle, RequestContext, WriteResult
from .paths import OutputPathResolver
from .urls import UrlDeriver


class StalenessChecker:
    """Decide whether existing output can be reused instead of rewritten."""

    def __init__(
        self,
        config: WriterConfig,
        resolver: OutputPathResolver,
        urls: UrlDeriver,
        store: OutputStore,
    ) -> None:
        """Initialize the checker with the writer's collaborators."""

        self._config = config
        self._resolver = resolver
        self._urls = urls
        self._store = store

    async def bundle_last_modified(self, bundle: Bundle) -> float:
        """Return the newest source modification time, or `UNKNOWN_MTIME`.

        Bundles without sources, or with any unreadable source, are unknown.
        """

        if not bundle.source_paths:
            return UNKNOWN_MTIME
        mtimes = await asyncio.gather(
            *(self._store.last_modified(path) for path in bundle.source_paths)
        )
        if any(mtime < 0 for mtime in mtimes):
            return UNKNOWN_MTIME
        return max(mtimes)

    async def check_bundle_up_to_date(
        self, bundle: Bundle, context: RequestContext | None = None
    ) -> bool:
        """Assign `output_file` and `url` to `bundle` when its output is current.

        Returns `True` when the existing output was reused. Checksummed bundles
        are never reused here because their filename depends on the content.
        """

        if self._config.checksums_for_bundle(bundle.checksums_enabled):
            return False

        output_file = self._resolver.for_bundle(bundle)
        source_mtime, output_mtime = await asyncio.gather(
            self.bundle_last_modified(bundle),
            self._store.last_modified(output_file),
        )
        if source_mtime >= 0 and output_mtime > source_mtime:
            bundle.output_file = output_file
            bundle.url = self._urls.bundle_url(bundle, context)
            logger.debug("Bundle {} is up to date at {}", bundle.name, output_file)
            return True
        return False

    async def check_resource_up_to_date(
        self, path: Path, context: RequestContext | None = None
    ) -> WriteResult | None:
        """Return the existing output of a resource when it is newer than the input."""

        if self._config.checksums_for_resources():
            return None

        output_file = self._resolver.for_resource(path)
        input_mtime, output_mtime = await asyncio.gather(
            self._store.last_modified(path),
            self._store.last_modified(output_file),
        )
        if input_mtime >= 0 and output_mtime > input_mtime:
            logger.debug("Resource {} is up to date at {}", path, output_file)
            return WriteResult(url=self._urls.url_for(output_file, context), output_file=output_file)
        return None
