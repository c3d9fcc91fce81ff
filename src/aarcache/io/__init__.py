"""Shared file I/O helpers."""

from .json_io import read_json_object, write_json_atomic

__all__ = ["read_json_object", "write_json_atomic"]
