"""Reporting utilities for sync output artifacts."""

from .stdout import StdoutReporter
from .writer import build_sync_report, write_sync_report

__all__ = ["StdoutReporter", "build_sync_report", "write_sync_report"]
