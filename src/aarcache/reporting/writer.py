"""Output writer for the sync report JSON artifact."""

from __future__ import annotations

from pathlib import Path

from aarcache.constants.reporting import REPORT_FILENAME, REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX, SCHEMA_VERSION
from aarcache.io import write_json_atomic
from aarcache.model import SyncResult
from aarcache.types import JsonObject


def build_sync_report(result: SyncResult, *, cache_dir: Path, fingerprint: str) -> JsonObject:
    """Return the report payload for one sync pass."""
    return {
        "schema_version": SCHEMA_VERSION,
        "cache_dir": str(cache_dir),
        "config_fingerprint": fingerprint,
        **result.to_dict(),
    }


def write_sync_report(out_root: Path, result: SyncResult, *, cache_dir: Path, fingerprint: str) -> Path:
    """Write the sync report JSON under ``out_root`` and return its path."""
    out_root.mkdir(parents=True, exist_ok=True)
    report_path = out_root / REPORT_FILENAME
    write_json_atomic(
        path=report_path,
        payload=build_sync_report(result, cache_dir=cache_dir, fingerprint=fingerprint),
        temp_prefix=REPORT_TEMP_PREFIX,
        temp_suffix=REPORT_TEMP_SUFFIX,
    )
    return report_path
