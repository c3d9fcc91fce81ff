"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "AARCACHE"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ AARCACHE",
    "     // unpacked aar libraries, kept in sync",
)
SYNC_SUMMARY_TITLE: str = "Sync summary"
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} local aar cache"))
