"""Core data models for aarcache."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from aarcache.model.artifacts import Artifact, RemoteOutputSnapshot
from aarcache.types import JsonObject, SyncMode

if TYPE_CHECKING:
    from aarcache.ports import ArtifactResolver


@dataclass(frozen=True)
class AarLibrary:
    """A declared AAR library: its library key and the locations of its outputs."""

    key: str
    aar: str
    jar: str | None = None


@dataclass(frozen=True)
class AarAndJar:
    """Work item for one declared AAR, with the jar that replaces the jars inside it."""

    aar: Artifact
    jar: Artifact | None
    library_key: str


@dataclass(frozen=True)
class ProjectView:
    """User-facing selection of which declared libraries take part in the sync."""

    excluded_libraries: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectData:
    """Declared libraries and how to resolve their artifact locations."""

    libraries: tuple[AarLibrary, ...]
    resolver: ArtifactResolver
    remote_outputs: RemoteOutputSnapshot = field(default_factory=RemoteOutputSnapshot)


@dataclass(frozen=True)
class UnpackStats:
    """Per-item outcome counts of one unpack/merge batch."""

    unpacked: int = 0
    failed_unpacks: int = 0
    removed_strays: int = 0
    merged_libraries: int = 0
    copied_files: int = 0
    skipped_files: int = 0
    failed_copies: int = 0


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one synchronization pass.

    ``cache_dir`` and ``config_fingerprint`` are filled in by the workspace entry
    point; the report carries them at the top level, not in ``to_dict``.
    """

    mode: SyncMode
    declared: int = 0
    updated: int = 0
    removed: int = 0
    stats: UnpackStats = field(default_factory=UnpackStats)
    completed: bool = False
    cancelled: bool = False
    duration_seconds: float = 0.0
    warnings: tuple[str, ...] = ()
    cache_dir: Path | None = None
    config_fingerprint: str | None = None

    def to_dict(self) -> JsonObject:
        return {
            "mode": self.mode,
            "declared": self.declared,
            "updated": self.updated,
            "removed": self.removed,
            "unpacked": self.stats.unpacked,
            "failed_unpacks": self.stats.failed_unpacks,
            "removed_strays": self.stats.removed_strays,
            "merged_libraries": self.stats.merged_libraries,
            "copied_files": self.stats.copied_files,
            "skipped_files": self.stats.skipped_files,
            "failed_copies": self.stats.failed_copies,
            "completed": self.completed,
            "cancelled": self.cancelled,
            "duration_seconds": round(self.duration_seconds, 3),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ResolvedLibrary:
    """Where a declared library's content lives after a sync pass."""

    library: AarLibrary
    aar_dir: Path | None
    resource_dir: Path | None
    class_jar: Path | None

    def to_dict(self) -> JsonObject:
        return {
            "key": self.library.key,
            "aar": self.library.aar,
            "aar_dir": str(self.aar_dir) if self.aar_dir is not None else None,
            "resource_dir": str(self.resource_dir) if self.resource_dir is not None else None,
            "class_jar": str(self.class_jar) if self.class_jar is not None else None,
        }
