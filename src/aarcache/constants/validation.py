"""Stable validation error codes and allowed-key sets for config validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # config file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # value out of range
CFG007: str = "CFG007"  # duplicate declaration
CFG008: str = "CFG008"  # root directory not found

ALL_CFG_CODES: tuple[str, ...] = (
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    CFG008,
)

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "project_name",
        "cache_dir",
        "max_workers",
        "excluded_libraries",
        "libraries",
        "remote_outputs",
    }
)
ALLOWED_LIBRARY_KEYS: frozenset[str] = frozenset({"key", "aar", "jar"})
REQUIRED_LIBRARY_KEYS: tuple[str, ...] = ("key", "aar")
ALLOWED_REMOTE_OUTPUT_KEYS: frozenset[str] = frozenset({"key", "digest", "path"})
REQUIRED_REMOTE_OUTPUT_KEYS: tuple[str, ...] = ("key", "digest", "path")
STRING_KEYS: tuple[str, ...] = ("project_name", "cache_dir")
LIST_OF_STRINGS_KEYS: tuple[str, ...] = ("excluded_libraries",)
