"""Top-level package for bundlewriter.

This package is the output stage of an asset build: it decides where bundles
and resources are written, whether existing output can be reused, and which
URL references the result. The main entry point is `FileWriter`.
"""

from .config import WriterConfig
from .models.datatypes import Bundle, RequestContext, WriteResult
from .writers.file_writer import FileWriter

__all__ = [
    "Bundle",
    "FileWriter",
    "RequestContext",
    "WriteResult",
    "WriterConfig",
    "__version__",
]

__version__ = "0.1.0"
