"""Prefetcher adapters."""

from __future__ import annotations

import logging
from concurrent.futures import Future

from aarcache.model import RemoteArtifact

logger = logging.getLogger(__name__)


class NoopPrefetcher:
    """Prefetcher for workspaces whose artifacts are all local.

    Remote artifacts handed to it stay unfetched; their unpack fails per item
    and is retried on the next pass.
    """

    def download_artifacts(self, project_name: str, artifacts: set[RemoteArtifact]) -> Future[None]:
        missing = sorted(artifact.key for artifact in artifacts if not artifact.is_fetched)
        if missing:
            logger.warning(
                "No remote transport configured for %s; %d artifact(s) not fetched: %s",
                project_name,
                len(missing),
                ", ".join(missing),
            )
        future: Future[None] = Future()
        future.set_result(None)
        return future
