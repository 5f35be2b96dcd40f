"""Telemetry and observability helpers.

This package tracks write counters and emits per-artifact write events.
"""

from .logger import RunLogger
from .stats import WriteStats

__all__ = ["RunLogger", "WriteStats"]
