"""Config data model for aarcache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from aarcache.constants.config import DEFAULT_CACHE_DIR, DEFAULT_MAX_WORKERS
from aarcache.types import LibraryConfig, RemoteOutputConfig


@dataclass(frozen=True)
class AarCacheConfig:
    """Resolved cache config."""

    project_name: str | None = None
    cache_dir: str = DEFAULT_CACHE_DIR
    max_workers: int = DEFAULT_MAX_WORKERS
    excluded_libraries: tuple[str, ...] = ()
    libraries: tuple[LibraryConfig, ...] = ()
    remote_outputs: tuple[RemoteOutputConfig, ...] = ()

    def resolve_project_name(self, root: Path) -> str:
        """Project name used when asking the prefetcher for artifacts."""
        return self.project_name or root.resolve().name

    def resolve_cache_dir(self, root: Path) -> Path:
        """Absolute cache root; relative paths are taken from the workspace root."""
        path = Path(self.cache_dir).expanduser()
        if not path.is_absolute():
            path = root.resolve() / path
        return path
