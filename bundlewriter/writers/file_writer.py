"""Filesystem writer for bundles and resources.

Responsibilities:
- Orchestrate checksum calculation, output path resolution, streamed writes,
  and URL assignment for one artifact at a time.
- Reuse up-to-date output instead of rewriting it when checksums are off.
- Report exactly one outcome per write: the written artifact or an error.

Key public types:
- `FileWriter`: async writer bound to one `WriterConfig` for a build run.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from loguru import logger

from ..config import WriterConfig
from ..errors import BundleWriterError, InvalidArgumentError, StreamFailureError
from ..io.checksum import ChecksumCalculator, ReplayStream
from ..io.storage import OutputStore
from ..io.streams import ByteStream, StreamSource, as_byte_stream, iter_file
from ..models.datatypes import Bundle, RequestContext, WriteResult
from ..telemetry.logger import RunLogger
from ..telemetry.stats import WriteStats
from .paths import OutputPathResolver
from .staleness import StalenessChecker
from .urls import UrlDeriver


class FileWriter:
    """Write artifacts beneath an output root and assign their public URLs.

    Writes to distinct output files may run concurrently on one event loop.
    Two concurrent writes to the same output file are not arbitrated; the
    last one to close wins.
    """

    def __init__(
        self,
        config: WriterConfig | None = None,
        *,
        store: OutputStore | None = None,
        checksum_calculator: ChecksumCalculator | None = None,
        run_logger: RunLogger | None = None,
        stats: WriteStats | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Initialize the writer and resolve configured directories against `cwd`."""

        base_config = config if config is not None else WriterConfig()
        base_config.validate()
        self.config = base_config.resolved(cwd)
        self.stats = stats if stats is not None else WriteStats()
        self.resolver = OutputPathResolver(self.config)
        self.urls = UrlDeriver(self.config, self.resolver)
        self._store = store if store is not None else OutputStore()
        self._checksums = (
            checksum_calculator if checksum_calculator is not None else ChecksumCalculator()
        )
        self._run_logger = run_logger
        self.staleness = StalenessChecker(self.config, self.resolver, self.urls, self._store)

    @property
    def output_dir(self) -> Path:
        """Absolute output root for this run."""

        return self.config.output_dir

    async def check_bundle_up_to_date(
        self, bundle: Bundle, context: RequestContext | None = None
    ) -> bool:
        """Assign the existing output to `bundle` when it is current; see `StalenessChecker`."""

        reused = await self.staleness.check_bundle_up_to_date(bundle, context)
        if reused:
            self._on_reuse(bundle.name, bundle.output_file)
        return reused

    async def check_resource_up_to_date(
        self, path: Path, context: RequestContext | None = None
    ) -> WriteResult | None:
        """Return the existing output of a resource when it is current."""

        result = await self.staleness.check_resource_up_to_date(path, context)
        if result is not None:
            self._on_reuse(str(path), result.output_file)
        return result

    async def write_bundle(
        self,
        source: StreamSource | None,
        bundle: Bundle | None,
        context: RequestContext | None = None,
    ) -> Bundle:
        """Stream bundle content to its output file and return the updated bundle.

        The checksum, when required and not already known, is computed and
        assigned before the output path is resolved. `output_file` and `url`
        are assigned only after the output file is closed.

        Raises:
            InvalidArgumentError: If the input or bundle is missing.
            StreamFailureError: If reading the input or writing the output fails.
        """

        if bundle is None:
            raise InvalidArgumentError('"bundle" is required')
        stream = as_byte_stream(source)

        compute_checksum = (
            self.config.checksums_for_bundle(bundle.checksums_enabled) and not bundle.checksum
        )

        def resolve_output(checksum: str | None) -> Path:
            if checksum:
                bundle.checksum = checksum
            return self.resolver.for_bundle(bundle)

        output_file = await self._pipe_out(bundle.name, stream, compute_checksum, resolve_output)
        bundle.output_file = output_file
        bundle.url = self.urls.bundle_url(bundle, context)
        return bundle

    async def write_resource(
        self,
        source: StreamSource | None,
        path: Path | None,
        context: RequestContext | None = None,
    ) -> WriteResult:
        """Stream a resource to its output file and return its URL and location.

        Raises:
            InvalidArgumentError: If the input or resource path is missing.
            StreamFailureError: If reading the input or writing the output fails.
        """

        if path is None:
            raise InvalidArgumentError('"path" is required')
        resource_path = Path(path)
        stream = as_byte_stream(source)

        def resolve_output(checksum: str | None) -> Path:
            return self.resolver.for_resource(resource_path, checksum)

        output_file = await self._pipe_out(
            str(resource_path),
            stream,
            self.config.checksums_for_resources(),
            resolve_output,
        )
        return WriteResult(url=self.urls.url_for(output_file, context), output_file=output_file)

    async def write_resource_file(
        self, path: Path, context: RequestContext | None = None
    ) -> WriteResult:
        """Write a resource from disk, reusing current output when possible."""

        existing = await self.check_resource_up_to_date(path, context)
        if existing is not None:
            return existing
        return await self.write_resource(iter_file(path), path, context)

    async def _pipe_out(
        self,
        artifact: str,
        stream: ByteStream,
        compute_checksum: bool,
        resolve_output: Callable[[str | None], Path],
    ) -> Path:
        """Run checksum, resolve, and write steps in order for one artifact."""

        stage = "checksum" if compute_checksum else "write"
        output_file: Path | None = None
        self._on_write_start(stage, artifact)
        replay: ReplayStream | None = None
        try:
            checksum = None
            if compute_checksum:
                replay, digest = self._checksums.transform(stream)
                stream = replay
                checksum = await digest
                stage = "write"
            output_file = resolve_output(checksum)
            logger.debug("Piping out {} to {}", artifact, output_file)
            written = await self._store.write_stream(output_file, stream)
        except BundleWriterError as exc:
            self._on_write_failure(stage, artifact, exc)
            raise
        except Exception as exc:
            self._on_write_failure(stage, artifact, exc)
            raise StreamFailureError(
                f"Failed to write `{artifact}` during {stage}: {exc}",
                output_file=output_file,
                hint="Check that the input is readable and the output directory is writable.",
            ) from exc
        finally:
            if replay is not None:
                await replay.aclose()

        self.stats.add_written(written)
        if self._run_logger is not None:
            self._run_logger.log_write_complete(stage, artifact, output_file)
        return output_file

    def _on_write_start(self, stage: str, artifact: str) -> None:
        if self._run_logger is not None:
            self._run_logger.log_write_start(stage, artifact)

    def _on_write_failure(self, stage: str, artifact: str, exc: Exception) -> None:
        self.stats.add_failed()
        if self._run_logger is not None:
            self._run_logger.log_write_failure(stage, artifact, type(exc).__name__)

    def _on_reuse(self, artifact: str, output_file: Path | None) -> None:
        self.stats.add_reused()
        if self._run_logger is not None:
            self._run_logger.log_reuse(artifact, output_file)
