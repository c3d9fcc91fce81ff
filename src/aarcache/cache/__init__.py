"""Unpacked AAR cache engine."""

from __future__ import annotations

from typing import Any

__all__ = ["AarCache", "FetchExecutor", "SyncContext", "UnpackedAars", "Unpacker", "find_updated_outputs"]


def __getattr__(name: str) -> Any:
    """Lazily expose cache APIs to avoid import cycles at package import time."""
    if name == "AarCache":
        from .state import AarCache

        return AarCache
    if name == "FetchExecutor":
        from .executor import FetchExecutor

        return FetchExecutor
    if name == "SyncContext":
        from .context import SyncContext

        return SyncContext
    if name == "UnpackedAars":
        from .orchestrator import UnpackedAars

        return UnpackedAars
    if name == "Unpacker":
        from .unpacker import Unpacker

        return Unpacker
    if name == "find_updated_outputs":
        from .differ import find_updated_outputs

        return find_updated_outputs
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
