"""Shared type aliases for aarcache."""

from .common import JsonObject, JsonScalar, JsonValue, SyncMode
from .config import LibraryConfig, RemoteOutputConfig
from .snapshot import RemoteOutputEntry, RemoteSnapshotPayload

__all__ = [
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "LibraryConfig",
    "RemoteOutputConfig",
    "RemoteOutputEntry",
    "RemoteSnapshotPayload",
    "SyncMode",
]
