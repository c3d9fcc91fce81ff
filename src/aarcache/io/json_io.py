"""JSON persistence for the sync report and the remote-output snapshot."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from aarcache.types import JsonObject


def read_json_object(path: Path) -> JsonObject | None:
    """Return the JSON object stored at ``path``.

    Missing, unreadable or malformed files, and documents whose top level is not
    an object, all read as ``None``.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def write_json_atomic(path: Path, payload: object, *, temp_prefix: str, temp_suffix: str) -> None:
    """Write ``payload`` next to ``path`` and rename it into place.

    Readers never observe a partially written file. The temp file is removed
    if serialization or the rename fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=temp_prefix, suffix=temp_suffix)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
