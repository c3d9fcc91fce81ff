"""Collaborator interfaces the cache engine depends on."""

from .collector import ArtifactResolver, LibraryCollector
from .filesystem import FileOperationProvider
from .prefetcher import ArtifactPrefetcher

__all__ = [
    "ArtifactPrefetcher",
    "ArtifactResolver",
    "FileOperationProvider",
    "LibraryCollector",
]
