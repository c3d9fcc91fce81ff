"""Reporting constants for sync output artifacts."""

from __future__ import annotations

SCHEMA_VERSION: str = "1"
REPORT_FILENAME: str = "sync-report.json"
REPORT_TEMP_PREFIX: str = ".aarcache-report-"
REPORT_TEMP_SUFFIX: str = ".json.tmp"

ANSI_RED: str = "\033[31m"
ANSI_GREEN: str = "\033[32m"
ANSI_YELLOW: str = "\033[33m"
ANSI_RESET: str = "\033[0m"
