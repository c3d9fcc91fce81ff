"""Artifact prefetcher port interface."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

from aarcache.model import RemoteArtifact


class ArtifactPrefetcher(Protocol):
    """Port that downloads remote artifacts before they are read."""

    def download_artifacts(self, project_name: str, artifacts: set[RemoteArtifact]) -> Future[None]:
        """Start downloading ``artifacts``; the returned future completes when all are local."""
        ...
