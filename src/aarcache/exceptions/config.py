"""Configuration-related exceptions."""

from __future__ import annotations

from aarcache.exceptions.base import AarCacheError


class ConfigError(AarCacheError, ValueError):
    """Raised when cache configuration or the library manifest is invalid."""


class CacheConfigurationError(AarCacheError):
    """Raised when a remote-only artifact is requested but has no cached copy."""
