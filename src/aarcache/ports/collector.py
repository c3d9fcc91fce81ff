"""Library collector and artifact resolver port interfaces."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from aarcache.model.artifacts import Artifact

if TYPE_CHECKING:
    from aarcache.model.entities import AarLibrary, ProjectData, ProjectView


class ArtifactResolver(Protocol):
    """Port that maps a declared artifact location to a concrete artifact."""

    def resolve_output(self, location: str) -> Artifact:
        """Resolve ``location`` to a local or remote artifact."""
        ...


class LibraryCollector(Protocol):
    """Port that discovers which AAR libraries the project declares."""

    def collect(self, view: ProjectView, project_data: ProjectData) -> Iterable[AarLibrary]:
        """Return the AAR libraries selected by ``view``."""
        ...
