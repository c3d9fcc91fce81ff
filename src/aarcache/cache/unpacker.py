"""Unpack fetched AARs into the cache and merge AARs that share a library key.

Each AAR is unpacked into ``<key-name>_<hash>.aar``. The IDE needs at least the
``res/`` folder and the ``R.txt`` next to it, and may read ``AndroidManifest.xml``.
Jars bundled inside the AAR are skipped: the merged output jar declared for the
library is copied to ``jars/classes_and_libs_merged.jar`` instead.

Raw directories sharing a library key are then merged into
``<library-key>_<hash>.mergedaar``, keeping the same relative layout.
"""

from __future__ import annotations

import io
import logging
import time
import zipfile
import zlib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from aarcache.cache.context import SyncContext
from aarcache.cache.executor import FetchExecutor, wait_for_all
from aarcache.constants.cache import (
    DOT_AAR,
    DOT_JAR,
    MERGE_EXPECTED_DUPLICATES,
    STAMP_FILE_NAME,
)
from aarcache.model import AarAndJar, Artifact, LocalArtifact, UnpackStats
from aarcache.ports import FileOperationProvider
from aarcache.utils import aar_dir_name, artifact_key, jar_file, merged_aar_dir_name

logger = logging.getLogger(__name__)

# Corrupt, truncated, encrypted or unsupported archives fail extraction with any of these.
_UNPACK_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


@dataclass(frozen=True)
class _CopyOutcome:
    copied: int = 0
    skipped: int = 0
    failed: int = 0


class Unpacker:
    """Materializes raw and merged cache directories on a shared worker pool."""

    def __init__(self, *, fs: FileOperationProvider, executor: FetchExecutor) -> None:
        self._fs = fs
        self._executor = executor

    def unpack(
        self,
        to_cache: Mapping[str, AarAndJar],
        updated_keys: set[str],
        dest_dir: Path,
        context: SyncContext | None = None,
    ) -> UnpackStats:
        """Unpack updated AARs into ``dest_dir`` and rebuild every merged directory."""
        unpacked, failed_unpacks = self._unpack_aars_to_dir(to_cache, updated_keys, dest_dir, context)
        removed_strays = self._remove_non_aar_directories(dest_dir, context)
        merged_libraries, outcome = self._merge_aars(to_cache, dest_dir, context)
        return UnpackStats(
            unpacked=unpacked,
            failed_unpacks=failed_unpacks,
            removed_strays=removed_strays,
            merged_libraries=merged_libraries,
            copied_files=outcome.copied,
            skipped_files=outcome.skipped,
            failed_copies=outcome.failed,
        )

    def _unpack_aars_to_dir(
        self,
        to_cache: Mapping[str, AarAndJar],
        updated_keys: set[str],
        dest_dir: Path,
        context: SyncContext | None,
    ) -> tuple[int, int]:
        futures = [
            self._executor.submit(self._unpack_aar_to_dir, to_cache[key], dest_dir)
            for key in sorted(updated_keys)
            if key in to_cache
        ]
        wait_for_all(futures, context)
        succeeded = sum(1 for future in futures if future.result())
        return succeeded, len(futures) - succeeded

    def _unpack_aar_to_dir(self, aar_and_jar: AarAndJar, dest_dir: Path) -> bool:
        """Unpack one AAR and stamp it with the source's modification time."""
        aar_dir = dest_dir / aar_dir_name(aar_and_jar.aar)
        try:
            if self._fs.exists(aar_dir):
                self._fs.delete_recursively(aar_dir)
            self._fs.mkdirs(aar_dir)
            self._extract_without_jars(aar_and_jar.aar, aar_dir)

            self._create_stamp_file(aar_dir, aar_and_jar.aar)

            if aar_and_jar.jar is not None:
                destination = jar_file(aar_dir)
                self._fs.mkdirs(destination.parent)
                with aar_and_jar.jar.open_stream() as stream:
                    self._fs.write_stream(destination, stream)
        except _UNPACK_ERRORS as exc:
            logger.warning("Failed to extract AAR %s to %s: %s", artifact_key(aar_and_jar.aar), aar_dir, exc)
            return False
        return True

    def _extract_without_jars(self, aar: Artifact, aar_dir: Path) -> None:
        """Extract an AAR, skipping bundled jars."""
        with aar.open_stream() as stream, zipfile.ZipFile(stream) as archive:
            for member in archive.infolist():
                if member.filename.endswith(DOT_JAR):
                    continue
                target = _member_path(aar_dir, member.filename)
                if target is None:
                    continue
                if member.is_dir():
                    self._fs.mkdirs(target)
                    continue
                self._fs.mkdirs(target.parent)
                with archive.open(member) as content:
                    self._fs.write_stream(target, content)

    def _create_stamp_file(self, aar_dir: Path, aar: Artifact) -> None:
        stamp_file = aar_dir / STAMP_FILE_NAME
        try:
            self._fs.write_stream(stamp_file, io.BytesIO())
            if not isinstance(aar, LocalArtifact):
                # Remote artifacts carry no meaningful local timestamp.
                return
            source_time = self._fs.get_modified_time(aar.path)
            if not self._fs.set_modified_time(stamp_file, source_time):
                logger.warning("Failed to set AAR cache timestamp for %s", aar.path)
        except OSError as exc:
            logger.warning("Failed to set AAR cache timestamp for %s: %s", artifact_key(aar), exc)

    def _remove_non_aar_directories(self, cache_dir: Path, context: SyncContext | None) -> int:
        """Delete every entry not ending in ``.aar``; merged output is rebuilt each pass."""
        children = self._fs.list_files(cache_dir)
        if children is None:
            return 0
        strays = [child for child in children if not child.name.endswith(DOT_AAR)]
        futures = [self._executor.submit(self._delete_quietly, stray) for stray in strays]
        wait_for_all(futures, context)
        return len(strays)

    def _delete_quietly(self, path: Path) -> None:
        try:
            self._fs.delete_recursively(path)
        except OSError as exc:
            logger.warning("Failed to remove %s: %s", path, exc)

    def _merge_aars(
        self,
        to_merge: Mapping[str, AarAndJar],
        cache_dir: Path,
        context: SyncContext | None,
    ) -> tuple[int, _CopyOutcome]:
        """Copy each library's raw directories into its merged directory."""
        started_at = time.perf_counter()
        library_to_aars: dict[str, list[Artifact]] = {}
        for aar_and_jar in to_merge.values():
            library_to_aars.setdefault(aar_and_jar.library_key, []).append(aar_and_jar.aar)

        futures = []
        for library_key, aars in sorted(library_to_aars.items()):
            dest_dir = cache_dir / merged_aar_dir_name(library_key)
            for aar in aars:
                src_dir = cache_dir / aar_dir_name(aar)
                futures.append(self._executor.submit(self._copy_files, src_dir, dest_dir))
        wait_for_all(futures, context)

        outcomes = [future.result() for future in futures]
        logger.info("Merged %d aars in %.1f sec.", len(to_merge), time.perf_counter() - started_at)
        return len(library_to_aars), _CopyOutcome(
            copied=sum(outcome.copied for outcome in outcomes),
            skipped=sum(outcome.skipped for outcome in outcomes),
            failed=sum(outcome.failed for outcome in outcomes),
        )

    def _copy_files(self, src: Path, dest: Path) -> _CopyOutcome:
        """Copy every file under ``src`` to the same relative path under ``dest``.

        The first writer wins. Same-named resource files are not merged.
        """
        copied = skipped = failed = 0
        for source_file in self._fs.list_files_recursively(src):
            dest_file = dest / source_file.relative_to(src)
            try:
                self._fs.mkdirs(dest_file.parent)
                if self._fs.exists(dest_file):
                    raise FileExistsError(dest_file)
                self._fs.copy(source_file, dest_file)
                copied += 1
            except FileExistsError:
                skipped += 1
                if dest_file.name not in MERGE_EXPECTED_DUPLICATES:
                    logger.info(
                        "Do not copy source file %s to merged aar directory %s since file already exists",
                        source_file,
                        dest_file,
                    )
            except OSError as exc:
                failed += 1
                logger.warning(
                    "Fail to copy source file %s to merged aar directory %s: %s", source_file, dest_file, exc
                )
        return _CopyOutcome(copied=copied, skipped=skipped, failed=failed)


def _member_path(aar_dir: Path, name: str) -> Path | None:
    """Map an archive member name below ``aar_dir``; absolute and ``..`` parts are dropped."""
    parts = [part for part in name.replace("\\", "/").split("/") if part not in ("", ".", "..")]
    return aar_dir.joinpath(*parts) if parts else None
