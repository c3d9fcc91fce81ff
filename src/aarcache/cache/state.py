"""Tracking of what is currently present in the unpacked AAR cache."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from concurrent.futures import Future
from pathlib import Path
from types import MappingProxyType

from aarcache.cache.executor import FetchExecutor
from aarcache.constants.cache import DOT_AAR, STAMP_FILE_NAME
from aarcache.ports import FileOperationProvider

logger = logging.getLogger(__name__)

_EMPTY_STATE: Mapping[str, Path] = MappingProxyType({})


class AarCache:
    """Local cache of the AARs referenced by the project.

    The state maps each cache entry name to its stamp file. A stamp file is
    used instead of the directory itself because a directory's mtime changes
    whenever one of its children does.
    """

    def __init__(self, cache_dir: Path, *, fs: FileOperationProvider, executor: FetchExecutor) -> None:
        self._cache_dir = cache_dir
        self._fs = fs
        self._executor = executor
        # Replaced wholesale; readers see either the old or the new mapping.
        self._cache_state: Mapping[str, Path] = _EMPTY_STATE

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def cached_keys(self) -> frozenset[str]:
        return frozenset(self._cache_state)

    def create_cache_dir(self) -> bool:
        """Ensure the cache root exists; return False when it cannot be created."""
        if self._fs.exists(self._cache_dir):
            return True
        return self._fs.mkdirs(self._cache_dir)

    def read_file_state(self) -> Mapping[str, Path]:
        """Scan the cache root and publish a fresh entry-name to stamp-file mapping."""
        children = self._fs.list_files(self._cache_dir)
        if children is None:
            return _EMPTY_STATE
        cached_files = MappingProxyType({child.name: child / STAMP_FILE_NAME for child in children})
        self._cache_state = cached_files
        return cached_files

    def remove_missing_files(self, aars_to_keep: Collection[str]) -> list[Future[None]]:
        """Schedule deletion of raw entries that are no longer declared.

        Only ``*.aar`` entries are considered; merged directories belong to the
        unpacker, which regenerates them on every pass.
        """
        keep = set(aars_to_keep)
        removed_keys = sorted(key for key in self._cache_state if key not in keep and key.endswith(DOT_AAR))
        return [self._executor.submit(self._delete_entry, self._cache_dir / key) for key in removed_keys]

    def clear_cache(self) -> None:
        """Delete the whole cache root; failures are logged, not raised."""
        if self._fs.exists(self._cache_dir):
            try:
                self._fs.delete_recursively(self._cache_dir)
            except OSError as exc:
                logger.warning("Failed to clear unpacked AAR directory %s: %s", self._cache_dir, exc)
        self._cache_state = _EMPTY_STATE

    def get_cached_aar_dir(self, aar_dir_name: str) -> Path | None:
        """Return the cache directory for an entry name, or None if it is not tracked."""
        cache_state = self._cache_state
        if not cache_state:
            logger.warning("Cache state is empty")
            return None
        if aar_dir_name not in cache_state:
            return None
        return self._cache_dir / aar_dir_name

    def _delete_entry(self, path: Path) -> None:
        try:
            self._fs.delete_recursively(path)
        except OSError as exc:
            logger.warning("Failed to remove cache entry %s: %s", path, exc)
