"""Sync mode names."""

from __future__ import annotations

SYNC_MODE_FULL: str = "full"
SYNC_MODE_INCREMENTAL: str = "incremental"
SYNC_MODE_PARTIAL: str = "partial"
SYNC_MODE_REFRESH: str = "refresh"

VALID_SYNC_MODES: frozenset[str] = frozenset({SYNC_MODE_FULL, SYNC_MODE_INCREMENTAL, SYNC_MODE_PARTIAL})
