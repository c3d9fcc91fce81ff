"""Default implementations of the collaborator ports."""

from .collector import ProjectLibraryCollector, WorkspaceArtifactResolver
from .local_fs import LocalFileOperations
from .prefetch import NoopPrefetcher

__all__ = [
    "LocalFileOperations",
    "NoopPrefetcher",
    "ProjectLibraryCollector",
    "WorkspaceArtifactResolver",
]
