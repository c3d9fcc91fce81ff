"""Default library collector and artifact resolver."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path

from aarcache.model import AarLibrary, Artifact, LocalArtifact, ProjectData, ProjectView, RemoteOutputSnapshot

logger = logging.getLogger(__name__)


class WorkspaceArtifactResolver:
    """Resolve declared locations against a workspace root and known remote outputs."""

    def __init__(self, root: Path, remote_outputs: RemoteOutputSnapshot | None = None) -> None:
        self._root = root
        self._remote_outputs = remote_outputs or RemoteOutputSnapshot()

    def resolve_output(self, location: str) -> Artifact:
        remote = self._remote_outputs.find(location)
        if remote is not None:
            return remote
        return LocalArtifact(self._root / location)


class ProjectLibraryCollector:
    """Collect the project's declared AAR libraries, minus those the view excludes."""

    def collect(self, view: ProjectView, project_data: ProjectData) -> Iterable[AarLibrary]:
        selected: list[AarLibrary] = []
        for library in project_data.libraries:
            if any(fnmatch.fnmatchcase(library.key, pattern) for pattern in view.excluded_libraries):
                logger.debug("Library %s excluded by project view", library.key)
                continue
            selected.append(library)
        return selected
