"""Exceptions raised while a sync pass is running."""

from __future__ import annotations

from aarcache.exceptions.base import AarCacheError


class ArtifactUnavailableError(AarCacheError, OSError):
    """Raised when a remote artifact is read before it has been fetched."""


class SyncCancelledError(AarCacheError):
    """Raised when a sync pass is cancelled while waiting on dispatched work."""


class BatchExecutionError(AarCacheError):
    """Raised when a task in a parallel batch fails unexpectedly."""
