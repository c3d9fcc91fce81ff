"""Typed configuration structures for declared libraries and remote outputs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LibraryConfig:
    """One ``libraries`` entry from ``aarcache.yaml``."""

    key: str
    aar: str
    jar: str | None = None


@dataclass(frozen=True)
class RemoteOutputConfig:
    """One ``remote_outputs`` entry: a declared location backed by a remote artifact."""

    key: str
    digest: str
    path: str
