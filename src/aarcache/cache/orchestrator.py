"""Keeps the unpacked AAR cache in sync with the project's declared libraries.

One pass diffs the declared AARs against the cache's stamp files, fetches the
changed artifacts, unpacks and merges them, then optionally prunes entries the
project no longer declares. Accessors resolve a library's resource directory
and class jar from the cache once a pass has completed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from pathlib import Path

from aarcache.cache.context import SyncContext
from aarcache.cache.differ import find_updated_outputs
from aarcache.cache.executor import FetchExecutor, wait_for_all, wait_for_future
from aarcache.cache.state import AarCache
from aarcache.cache.unpacker import Unpacker
from aarcache.constants.sync import SYNC_MODE_FULL, SYNC_MODE_INCREMENTAL, SYNC_MODE_REFRESH
from aarcache.exceptions import BatchExecutionError, CacheConfigurationError, SyncCancelledError
from aarcache.model import (
    AarAndJar,
    AarLibrary,
    Artifact,
    LocalArtifact,
    ProjectData,
    ProjectView,
    RemoteArtifact,
    RemoteOutputSnapshot,
    SyncResult,
    UnpackStats,
    remote_artifacts,
)
from aarcache.ports import ArtifactPrefetcher, ArtifactResolver, FileOperationProvider, LibraryCollector
from aarcache.types import SyncMode
from aarcache.utils import aar_dir_name, jar_file, merged_aar_dir_name, res_dir

logger = logging.getLogger(__name__)


class UnpackedAars:
    """Manage the local AARs used by a project.

    Dependencies are injected explicitly; nothing is looked up globally. One
    instance owns one cache root. Passes on the same root must be serialized
    by the caller.
    """

    def __init__(
        self,
        cache_dir: Path,
        *,
        project_name: str,
        library_collector: LibraryCollector,
        prefetcher: ArtifactPrefetcher,
        fs: FileOperationProvider,
        executor: FetchExecutor,
    ) -> None:
        self._project_name = project_name
        self._library_collector = library_collector
        self._prefetcher = prefetcher
        self._fs = fs
        self._aar_cache = AarCache(cache_dir, fs=fs, executor=executor)
        self._unpacker = Unpacker(fs=fs, executor=executor)

    @property
    def cache_dir(self) -> Path:
        return self._aar_cache.cache_dir

    def initialize(self) -> None:
        """Load the on-disk cache state at session start."""
        self._aar_cache.read_file_state()

    def clear_cache(self) -> None:
        self._aar_cache.clear_cache()

    def on_sync(
        self,
        context: SyncContext,
        view: ProjectView,
        project_data: ProjectData,
        old_project_data: ProjectData | None,
        sync_mode: SyncMode,
    ) -> SyncResult:
        """Run one sync pass in the given mode."""
        if sync_mode == SYNC_MODE_FULL:
            self.clear_cache()

        # Partial syncs only see part of the project, so they never prune.
        remove_missing_files = sync_mode == SYNC_MODE_INCREMENTAL
        return self.refresh(
            context,
            view,
            project_data,
            RemoteOutputSnapshot.from_project_data(old_project_data),
            remove_missing_files=remove_missing_files,
            mode=sync_mode,
        )

    def refresh_files(self, context: SyncContext, view: ProjectView, project_data: ProjectData) -> SyncResult | None:
        """Lightweight refresh outside of sync; skipped when the project has remote outputs."""
        if not project_data.remote_outputs.is_empty():
            # Remote artifacts are only refreshed during sync.
            return None
        return self.refresh(
            context,
            view,
            project_data,
            project_data.remote_outputs,
            remove_missing_files=False,
            mode=SYNC_MODE_REFRESH,
        )

    def refresh(
        self,
        context: SyncContext,
        view: ProjectView,
        project_data: ProjectData,
        previous_outputs: RemoteOutputSnapshot,
        *,
        remove_missing_files: bool,
        mode: SyncMode = SYNC_MODE_INCREMENTAL,
    ) -> SyncResult:
        """Bring the cache in line with the declared AARs.

        The cache state is re-read at the end of every pass that got past root
        creation, including failed and cancelled ones.
        """
        started_at = time.perf_counter()
        if not self._aar_cache.create_cache_dir():
            message = f"Could not create unpacked AAR directory: {self.cache_dir}"
            logger.warning(message)
            return SyncResult(mode=mode, duration_seconds=time.perf_counter() - started_at, warnings=(message,))

        warnings: list[str] = []
        declared = updated = removed = 0
        stats = UnpackStats()
        completed = False
        try:
            cache_files = self._aar_cache.read_file_state()
            project_state = self._artifacts_to_cache(view, project_data)
            declared = len(project_state)
            aar_outputs: dict[str, Artifact] = {key: item.aar for key, item in project_state.items()}

            updated_keys = set(
                find_updated_outputs(aar_outputs, cache_files, previous_outputs, fs=self._fs)
            )
            updated = len(updated_keys)

            # The jar is a separate output; it is only refreshed together with its aar.
            artifacts_to_download: set[Artifact] = set()
            for key in updated_keys:
                artifacts_to_download.add(project_state[key].aar)
                jar = project_state[key].jar
                if jar is not None:
                    artifacts_to_download.add(jar)

            download = self._prefetcher.download_artifacts(
                self._project_name, remote_artifacts(artifacts_to_download)
            )
            wait_for_future(context, download, "Fetching aar files")

            stats = self._unpacker.unpack(project_state, updated_keys, self.cache_dir, context)
            if updated_keys:
                context.output(f"Copied {len(updated_keys)} AARs")

            if remove_missing_files:
                removed_files = self._aar_cache.remove_missing_files(aars_to_keep=project_state.keys())
                wait_for_all(removed_files, context)
                removed = len(removed_files)
                if removed_files:
                    context.output(f"Removed {removed} AARs")
            completed = True
        except (SyncCancelledError, KeyboardInterrupt):
            context.set_cancelled()
            raise
        except BatchExecutionError as exc:
            message = f"Unpacked AAR synchronization didn't complete: {exc}"
            logger.warning(message)
            warnings.append(message)
        finally:
            # Update the in-memory record of which entries are cached.
            self._aar_cache.read_file_state()

        return SyncResult(
            mode=mode,
            declared=declared,
            updated=updated,
            removed=removed,
            stats=stats,
            completed=completed,
            duration_seconds=time.perf_counter() - started_at,
            warnings=tuple(warnings),
        )

    def get_class_jar(self, resolver: ArtifactResolver, library: AarLibrary) -> Path | None:
        """Return the merged jar for a library, in its merged AAR directory."""
        if library.jar is None:
            return None
        jar = resolver.resolve_output(library.jar)

        aar_dir = self.get_aar_dir(library)
        if aar_dir is None:
            # A remote jar is expected to be cached, so a miss here is unexpected.
            if isinstance(jar, RemoteArtifact):
                logger.warning(
                    "Fail to look up %s from cache state for library [aar = %s, jar = %s]",
                    merged_aar_dir_name(library.key),
                    library.aar,
                    library.jar,
                )
                logger.debug("Cache state contains the following keys: %s", sorted(self._aar_cache.cached_keys))
            return _fallback_file(jar)
        return jar_file(aar_dir)

    def get_resource_directory(self, library: AarLibrary) -> Path | None:
        """Return the ``res/`` directory of a library's merged AAR directory."""
        aar_dir = self.get_aar_dir(library)
        return None if aar_dir is None else res_dir(aar_dir)

    def get_aar_dir(self, library: AarLibrary) -> Path | None:
        return self._aar_cache.get_cached_aar_dir(merged_aar_dir_name(library.key))

    def _artifacts_to_cache(self, view: ProjectView, project_data: ProjectData) -> Mapping[str, AarAndJar]:
        """Map each raw cache entry name to the work item that produces it."""
        resolver = project_data.resolver
        outputs: dict[str, AarAndJar] = {}
        for library in self._library_collector.collect(view, project_data):
            aar = resolver.resolve_output(library.aar)
            jar = resolver.resolve_output(library.jar) if library.jar is not None else None
            outputs[aar_dir_name(aar)] = AarAndJar(aar=aar, jar=jar, library_key=library.key)
        return outputs


def _fallback_file(output: Artifact) -> Path:
    """The file to return if there is no locally cached version."""
    if isinstance(output, LocalArtifact):
        return output.path
    raise CacheConfigurationError("The AAR cache must be enabled when syncing remotely")
