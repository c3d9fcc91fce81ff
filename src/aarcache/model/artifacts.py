"""Artifact handles and the remote-output snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, BinaryIO

from aarcache.exceptions import ArtifactUnavailableError

if TYPE_CHECKING:
    from aarcache.model.entities import ProjectData


class Artifact(ABC):
    """Opaque handle to archive or jar content."""

    @abstractmethod
    def open_stream(self) -> BinaryIO:
        """Open the artifact content for binary reading."""


@dataclass(frozen=True)
class LocalArtifact(Artifact):
    """An artifact resident on the local filesystem."""

    path: Path

    def open_stream(self) -> BinaryIO:
        return self.path.open("rb")


@dataclass(frozen=True)
class RemoteArtifact(Artifact):
    """An artifact identified by its output key that must be fetched before reading.

    ``local_path`` is where the prefetcher materializes the bytes.
    """

    key: str
    digest: str
    local_path: Path

    @property
    def is_fetched(self) -> bool:
        return self.local_path.is_file()

    def open_stream(self) -> BinaryIO:
        try:
            return self.local_path.open("rb")
        except FileNotFoundError as exc:
            raise ArtifactUnavailableError(f"Remote artifact {self.key} has not been fetched") from exc


def remote_artifacts(artifacts: Iterable[Artifact]) -> set[RemoteArtifact]:
    """Return the remote members of ``artifacts``."""
    return {artifact for artifact in artifacts if isinstance(artifact, RemoteArtifact)}


@dataclass(frozen=True)
class RemoteOutputSnapshot:
    """Remote outputs known at the end of a sync pass, keyed by output key."""

    outputs: Mapping[str, RemoteArtifact] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "outputs", MappingProxyType(dict(self.outputs)))

    @classmethod
    def of(cls, artifacts: Iterable[RemoteArtifact]) -> RemoteOutputSnapshot:
        return cls({artifact.key: artifact for artifact in artifacts})

    @classmethod
    def from_project_data(cls, project_data: ProjectData | None) -> RemoteOutputSnapshot:
        """Return the snapshot carried by ``project_data``, or an empty one."""
        if project_data is None:
            return cls()
        return project_data.remote_outputs

    def find(self, key: str) -> RemoteArtifact | None:
        return self.outputs.get(key)

    def is_empty(self) -> bool:
        return not self.outputs

    def __len__(self) -> int:
        return len(self.outputs)
