"""Filesystem port interface."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol


class FileOperationProvider(Protocol):
    """The only filesystem surface the cache engine touches."""

    def exists(self, path: Path) -> bool:
        """Return True when ``path`` exists."""
        ...

    def mkdirs(self, path: Path) -> bool:
        """Create ``path`` and its parents; return False when creation fails."""
        ...

    def list_files(self, path: Path) -> list[Path] | None:
        """List immediate children of a directory, or None if it cannot be listed."""
        ...

    def list_files_recursively(self, path: Path) -> list[Path]:
        """List every regular file beneath ``path``."""
        ...

    def copy(self, source: Path, destination: Path) -> None:
        """Copy file bytes; raise FileExistsError if ``destination`` already exists."""
        ...

    def write_stream(self, destination: Path, stream: BinaryIO) -> None:
        """Write ``stream`` to ``destination``, replacing any existing file."""
        ...

    def delete_recursively(self, path: Path) -> None:
        """Delete a file or directory tree."""
        ...

    def get_modified_time(self, path: Path) -> int:
        """Return modification time in nanoseconds."""
        ...

    def set_modified_time(self, path: Path, mtime_ns: int) -> bool:
        """Set modification time in nanoseconds; return False on failure."""
        ...
