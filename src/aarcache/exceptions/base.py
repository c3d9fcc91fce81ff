"""Root of the aarcache exception hierarchy."""

from __future__ import annotations


class AarCacheError(Exception):
    """Base class for all aarcache errors."""
