"""Core data models for aarcache."""

from .artifacts import Artifact, LocalArtifact, RemoteArtifact, RemoteOutputSnapshot, remote_artifacts
from .entities import AarAndJar, AarLibrary, ProjectData, ProjectView, ResolvedLibrary, SyncResult, UnpackStats

__all__ = [
    "AarAndJar",
    "AarLibrary",
    "Artifact",
    "LocalArtifact",
    "ProjectData",
    "ProjectView",
    "RemoteArtifact",
    "RemoteOutputSnapshot",
    "ResolvedLibrary",
    "SyncResult",
    "UnpackStats",
    "remote_artifacts",
]
