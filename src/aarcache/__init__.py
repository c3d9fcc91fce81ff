"""Incremental local cache of unpacked and merged AAR artifacts."""

__version__ = "0.3.0"
