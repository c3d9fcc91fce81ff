"""Typed payload for the persisted remote-output snapshot."""

from __future__ import annotations

from typing import TypedDict


class RemoteOutputEntry(TypedDict):
    """Persisted fields of one remote artifact."""

    digest: str
    local_path: str


class RemoteSnapshotPayload(TypedDict):
    """Top-level snapshot payload persisted next to the cache root."""

    version: int
    outputs: dict[str, RemoteOutputEntry]
