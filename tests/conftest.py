"""Shared pytest fixtures for building AAR archives and cache collaborators."""

from __future__ import annotations

import os
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from aarcache.adapters import LocalFileOperations
from aarcache.cache.executor import FetchExecutor

MANIFEST: bytes = b'<manifest package="com.example"/>\n'


def write_aar(path: Path, files: dict[str, bytes], *, mtime_ns: int | None = None) -> Path:
    """Write a zip archive with ``files`` at ``path`` and optionally pin its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


@pytest.fixture()
def make_aar() -> Callable[..., Path]:
    """Return a factory writing AAR archives with a manifest and the given entries."""

    def _make(path: Path, files: dict[str, bytes] | None = None, *, mtime_ns: int | None = None) -> Path:
        entries = {"AndroidManifest.xml": MANIFEST, "R.txt": b"int string app_name 0x7f010001\n"}
        entries.update(files or {})
        return write_aar(path, entries, mtime_ns=mtime_ns)

    return _make


@pytest.fixture()
def fs() -> LocalFileOperations:
    return LocalFileOperations()


@pytest.fixture()
def executor() -> Iterator[FetchExecutor]:
    with FetchExecutor(max_workers=4) as pool:
        yield pool
