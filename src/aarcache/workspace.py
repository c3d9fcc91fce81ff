"""End-to-end workspace entry points: sync, lookup and clear.

These wire the config file to the cache engine: they build the project data,
the default collaborators and the shared worker pool, then drive
``UnpackedAars``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from aarcache.adapters import LocalFileOperations, NoopPrefetcher, ProjectLibraryCollector, WorkspaceArtifactResolver
from aarcache.cache.context import SyncContext
from aarcache.cache.executor import FetchExecutor
from aarcache.cache.orchestrator import UnpackedAars
from aarcache.cache.snapshot import fetched_outputs, load_remote_snapshot, save_remote_snapshot, snapshot_path
from aarcache.config import AarCacheConfig, config_fingerprint, load_config
from aarcache.constants.sync import SYNC_MODE_INCREMENTAL, VALID_SYNC_MODES
from aarcache.exceptions import ConfigError
from aarcache.model import (
    AarLibrary,
    ProjectData,
    ProjectView,
    RemoteArtifact,
    RemoteOutputSnapshot,
    ResolvedLibrary,
    SyncResult,
)
from aarcache.ports import ArtifactPrefetcher, FileOperationProvider
from aarcache.reporting.writer import write_sync_report
from aarcache.types import SyncMode

logger = logging.getLogger(__name__)


def build_project_data(root: Path, config: AarCacheConfig) -> ProjectData:
    """Turn the declared libraries and remote outputs of a config into project data."""
    root = root.resolve()
    remote_outputs = RemoteOutputSnapshot.of(
        RemoteArtifact(key=output.key, digest=output.digest, local_path=root / output.path)
        for output in config.remote_outputs
    )
    return ProjectData(
        libraries=tuple(AarLibrary(key=library.key, aar=library.aar, jar=library.jar) for library in config.libraries),
        resolver=WorkspaceArtifactResolver(root, remote_outputs),
        remote_outputs=remote_outputs,
    )


def build_unpacked_aars(
    root: Path,
    config: AarCacheConfig,
    executor: FetchExecutor,
    *,
    prefetcher: ArtifactPrefetcher | None = None,
    fs: FileOperationProvider | None = None,
) -> UnpackedAars:
    return UnpackedAars(
        config.resolve_cache_dir(root),
        project_name=config.resolve_project_name(root),
        library_collector=ProjectLibraryCollector(),
        prefetcher=prefetcher or NoopPrefetcher(),
        fs=fs or LocalFileOperations(),
        executor=executor,
    )


def sync_workspace(
    *,
    root: Path,
    config_path: Path | None = None,
    mode: SyncMode = SYNC_MODE_INCREMENTAL,
    out: Path | None = None,
    prefetcher: ArtifactPrefetcher | None = None,
    context: SyncContext | None = None,
) -> SyncResult:
    """Run one sync pass for a workspace and optionally write a JSON report."""
    if mode not in VALID_SYNC_MODES:
        raise ConfigError(f"Unknown sync mode {mode!r}. Valid modes: {', '.join(sorted(VALID_SYNC_MODES))}")

    root = root.resolve()
    if not root.is_dir():
        raise ConfigError(f"Workspace root does not exist or is not a directory: {root}")

    config = load_config(root, config_path)
    project_data = build_project_data(root, config)
    view = ProjectView(excluded_libraries=config.excluded_libraries)
    context = context or SyncContext()

    with FetchExecutor(config.max_workers) as executor:
        unpacked_aars = build_unpacked_aars(root, config, executor, prefetcher=prefetcher)
        snapshot_file = snapshot_path(unpacked_aars.cache_dir)
        previous_outputs = load_remote_snapshot(snapshot_file)
        old_project_data = (
            None
            if previous_outputs.is_empty()
            else ProjectData(libraries=(), resolver=project_data.resolver, remote_outputs=previous_outputs)
        )

        unpacked_aars.initialize()
        result = unpacked_aars.on_sync(context, view, project_data, old_project_data, mode)

    fingerprint = config_fingerprint(config)
    result = replace(result, cache_dir=unpacked_aars.cache_dir, config_fingerprint=fingerprint)
    if result.completed:
        save_remote_snapshot(snapshot_file, fetched_outputs(project_data.remote_outputs))

    if out is not None:
        report_path = write_sync_report(
            out.resolve(),
            result,
            cache_dir=unpacked_aars.cache_dir,
            fingerprint=fingerprint,
        )
        logger.debug("Wrote sync report to %s", report_path)
    return result


def lookup_library(
    *,
    root: Path,
    library_key: str,
    config_path: Path | None = None,
) -> list[ResolvedLibrary]:
    """Resolve every declared library with ``library_key`` against the current cache.

    Raises ``CacheConfigurationError`` when a remote-only jar has no cached copy.
    """
    root = root.resolve()
    config = load_config(root, config_path)
    project_data = build_project_data(root, config)

    with FetchExecutor(config.max_workers) as executor:
        unpacked_aars = build_unpacked_aars(root, config, executor)
        unpacked_aars.initialize()
        resolved: list[ResolvedLibrary] = []
        for library in project_data.libraries:
            if library.key != library_key:
                continue
            resolved.append(
                ResolvedLibrary(
                    library=library,
                    aar_dir=unpacked_aars.get_aar_dir(library),
                    resource_dir=unpacked_aars.get_resource_directory(library),
                    class_jar=unpacked_aars.get_class_jar(project_data.resolver, library),
                )
            )
    return resolved


def clear_workspace_cache(*, root: Path, config_path: Path | None = None) -> Path:
    """Delete the workspace's cache root and its remote-output snapshot."""
    root = root.resolve()
    config = load_config(root, config_path)
    with FetchExecutor(config.max_workers) as executor:
        unpacked_aars = build_unpacked_aars(root, config, executor)
        unpacked_aars.clear_cache()
    snapshot_path(unpacked_aars.cache_dir).unlink(missing_ok=True)
    return unpacked_aars.cache_dir
