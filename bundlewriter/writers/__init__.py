"""Output writers: path resolution, reuse checks, URL derivation, and writes."""

from .file_writer import FileWriter
from .paths import OutputPathResolver, extension_for_content_type
from .staleness import StalenessChecker
from .urls import UrlDeriver

__all__ = [
    "FileWriter",
    "OutputPathResolver",
    "StalenessChecker",
    "UrlDeriver",
    "extension_for_content_type",
]
