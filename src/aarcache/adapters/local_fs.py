"""Filesystem adapter backed by the local disk."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import BinaryIO

from aarcache.constants.cache import COPY_CHUNK_SIZE


class LocalFileOperations:
    """``FileOperationProvider`` implementation over pathlib and shutil."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def mkdirs(self, path: Path) -> bool:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return True

    def list_files(self, path: Path) -> list[Path] | None:
        try:
            return sorted(path.iterdir())
        except OSError:
            return None

    def list_files_recursively(self, path: Path) -> list[Path]:
        if not path.is_dir():
            return []
        return sorted(candidate for candidate in path.rglob("*") if candidate.is_file())

    def copy(self, source: Path, destination: Path) -> None:
        # "xb" makes the existence check and the create a single step for concurrent writers.
        with source.open("rb") as src, destination.open("xb") as dst:
            shutil.copyfileobj(src, dst, COPY_CHUNK_SIZE)

    def write_stream(self, destination: Path, stream: BinaryIO) -> None:
        with destination.open("wb") as handle:
            shutil.copyfileobj(stream, handle, COPY_CHUNK_SIZE)

    def delete_recursively(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()

    def get_modified_time(self, path: Path) -> int:
        return path.stat().st_mtime_ns

    def set_modified_time(self, path: Path, mtime_ns: int) -> bool:
        try:
            os.utime(path, ns=(mtime_ns, mtime_ns))
        except OSError:
            return False
        return True
