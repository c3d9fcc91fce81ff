"""Shared exception hierarchy for aarcache."""

from __future__ import annotations

from .base import AarCacheError
from .config import CacheConfigurationError, ConfigError
from .sync import ArtifactUnavailableError, BatchExecutionError, SyncCancelledError

__all__ = [
    "AarCacheError",
    "ArtifactUnavailableError",
    "BatchExecutionError",
    "CacheConfigurationError",
    "ConfigError",
    "SyncCancelledError",
]
