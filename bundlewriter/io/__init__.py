"""Input/output collaborators for the writer.

This package contains checksum calculation, async byte streams, package-root
lookup, and the filesystem output store.
"""

from .checksum import ChecksumCalculator
from .storage import UNKNOWN_MTIME, OutputStore
from .streams import ByteStream, as_byte_stream, concat_streams, iter_file

__all__ = [
    "ByteStream",
    "ChecksumCalculator",
    "OutputStore",
    "UNKNOWN_MTIME",
    "as_byte_stream",
    "concat_streams",
    "iter_file",
]
