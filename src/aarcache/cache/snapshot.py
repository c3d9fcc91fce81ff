"""Persistence of the remote outputs known at the end of a sync pass.

The snapshot plays the role of the previous project data: the next pass diffs
remote artifacts against it. It lives next to the cache root, never inside it,
because every child of the cache root is treated as a cache entry.
"""

from __future__ import annotations

from pathlib import Path

from aarcache.constants.config import (
    REMOTE_SNAPSHOT_FILENAME,
    REMOTE_SNAPSHOT_VERSION,
    SNAPSHOT_TEMP_PREFIX,
    SNAPSHOT_TEMP_SUFFIX,
)
from aarcache.io import read_json_object, write_json_atomic
from aarcache.model import RemoteArtifact, RemoteOutputSnapshot
from aarcache.types import RemoteOutputEntry, RemoteSnapshotPayload


def snapshot_path(cache_dir: Path) -> Path:
    return cache_dir.parent / REMOTE_SNAPSHOT_FILENAME


def load_remote_snapshot(path: Path) -> RemoteOutputSnapshot:
    """Load a snapshot file if valid, otherwise return an empty snapshot."""
    payload = read_json_object(path)
    if payload is None or payload.get("version") != REMOTE_SNAPSHOT_VERSION:
        return RemoteOutputSnapshot()

    raw_outputs = payload.get("outputs")
    if not isinstance(raw_outputs, dict):
        return RemoteOutputSnapshot()

    artifacts: list[RemoteArtifact] = []
    for key, value in raw_outputs.items():
        if not isinstance(key, str) or not isinstance(value, dict):
            continue
        digest = value.get("digest")
        local_path = value.get("local_path")
        if not isinstance(digest, str) or not isinstance(local_path, str):
            continue
        artifacts.append(RemoteArtifact(key=key, digest=digest, local_path=Path(local_path)))
    return RemoteOutputSnapshot.of(artifacts)


def save_remote_snapshot(path: Path, snapshot: RemoteOutputSnapshot) -> None:
    """Persist the snapshot atomically."""
    outputs: dict[str, RemoteOutputEntry] = {
        key: {"digest": artifact.digest, "local_path": str(artifact.local_path)}
        for key, artifact in sorted(snapshot.outputs.items())
    }
    payload: RemoteSnapshotPayload = {
        "version": REMOTE_SNAPSHOT_VERSION,
        "outputs": outputs,
    }
    write_json_atomic(
        path=path,
        payload=payload,
        temp_prefix=SNAPSHOT_TEMP_PREFIX,
        temp_suffix=SNAPSHOT_TEMP_SUFFIX,
    )


def fetched_outputs(snapshot: RemoteOutputSnapshot) -> RemoteOutputSnapshot:
    """Drop outputs that never reached local disk so the next pass retries them."""
    return RemoteOutputSnapshot.of(artifact for artifact in snapshot.outputs.values() if artifact.is_fetched)
