"""Diffing of declared outputs against the cache's stamp files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from aarcache.model import Artifact, LocalArtifact, RemoteArtifact, RemoteOutputSnapshot
from aarcache.ports import FileOperationProvider

logger = logging.getLogger(__name__)


def find_updated_outputs(
    new_outputs: Mapping[str, Artifact],
    cached_files: Mapping[str, Path],
    previous_outputs: RemoteOutputSnapshot,
    *,
    fs: FileOperationProvider,
) -> dict[str, Artifact]:
    """Return the declared outputs whose cache entries are missing or stale.

    Pure with respect to the cache: stamps and sources are only stat'ed.
    """
    updated: dict[str, Artifact] = {}
    for key, artifact in new_outputs.items():
        cached = cached_files.get(key)
        if cached is None or _should_update(artifact, cached, previous_outputs, fs):
            updated[key] = artifact
    return updated


def _should_update(
    artifact: Artifact,
    stamp: Path,
    previous_outputs: RemoteOutputSnapshot,
    fs: FileOperationProvider,
) -> bool:
    if isinstance(artifact, RemoteArtifact):
        return _should_update_remote(artifact, stamp, previous_outputs, fs)
    if isinstance(artifact, LocalArtifact):
        return _should_update_local(artifact, stamp, fs)
    return True


def _should_update_remote(
    artifact: RemoteArtifact,
    stamp: Path,
    previous_outputs: RemoteOutputSnapshot,
    fs: FileOperationProvider,
) -> bool:
    if not fs.exists(stamp):
        # The stamp is written after extraction, so its absence means an interrupted unpack.
        return True
    previous = previous_outputs.find(artifact.key)
    if previous is None:
        # Newly remote: either new to the project or previously a local output.
        return True
    return previous.digest != artifact.digest


def _should_update_local(artifact: LocalArtifact, stamp: Path, fs: FileOperationProvider) -> bool:
    try:
        return fs.get_modified_time(artifact.path) != fs.get_modified_time(stamp)
    except OSError as exc:
        logger.debug("Treating %s as stale: %s", artifact.path, exc)
        return True
