"""Tests for JSON Schema validation of the sync report."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from aarcache.config import AarCacheConfig, config_fingerprint
from aarcache.constants.reporting import REPORT_FILENAME, SCHEMA_VERSION
from aarcache.model import SyncResult, UnpackStats
from aarcache.reporting.writer import build_sync_report, write_sync_report

SCHEMAS_DIR: Path = Path(__file__).resolve().parents[2] / "schemas"
REPORT_SCHEMA_PATH: Path = SCHEMAS_DIR / "sync-report.schema.json"


@pytest.fixture()
def report_schema() -> dict[str, Any]:
    """Load the sync report JSON Schema."""
    return json.loads(REPORT_SCHEMA_PATH.read_text(encoding="utf-8"))


def _make_result(**overrides: Any) -> SyncResult:
    fields: dict[str, Any] = {
        "mode": "incremental",
        "declared": 3,
        "updated": 2,
        "removed": 1,
        "stats": UnpackStats(unpacked=2, merged_libraries=2, copied_files=9, skipped_files=2),
        "completed": True,
        "duration_seconds": 0.12345,
    }
    fields.update(overrides)
    return SyncResult(**fields)


def test_schema_is_valid_draft_2020_12(report_schema: dict[str, Any]) -> None:
    jsonschema.Draft202012Validator.check_schema(report_schema)


def test_written_report_conforms_to_schema(tmp_path: Path, report_schema: dict[str, Any]) -> None:
    path = write_sync_report(
        tmp_path / "out",
        _make_result(),
        cache_dir=tmp_path / "cache",
        fingerprint=config_fingerprint(AarCacheConfig()),
    )

    assert path == tmp_path / "out" / REPORT_FILENAME
    payload = json.loads(path.read_text(encoding="utf-8"))
    jsonschema.validate(payload, report_schema)
    assert payload["schema_version"] == SCHEMA_VERSION
    assert payload["duration_seconds"] == 0.123


def test_incomplete_report_with_warnings_conforms(tmp_path: Path, report_schema: dict[str, Any]) -> None:
    payload = build_sync_report(
        _make_result(
            mode="partial",
            completed=False,
            stats=UnpackStats(failed_unpacks=1, failed_copies=2),
            warnings=("Unpacked AAR synchronization didn't complete: boom",),
        ),
        cache_dir=tmp_path,
        fingerprint="0" * 64,
    )

    jsonschema.validate(payload, report_schema)


def test_schema_rejects_unknown_mode(tmp_path: Path, report_schema: dict[str, Any]) -> None:
    payload = build_sync_report(_make_result(), cache_dir=tmp_path, fingerprint="0" * 64)
    payload["mode"] = "everything"

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(payload, report_schema)


def test_schema_rejects_extra_fields(tmp_path: Path, report_schema: dict[str, Any]) -> None:
    payload = build_sync_report(_make_result(), cache_dir=tmp_path, fingerprint="0" * 64)
    payload["unexpected"] = 1

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(payload, report_schema)
