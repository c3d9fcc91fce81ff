"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "aarcache.yaml"
DEFAULT_CACHE_DIR: str = ".aarcache/aar_libraries"
REMOTE_SNAPSHOT_FILENAME: str = "remote_outputs.json"
REMOTE_SNAPSHOT_VERSION: int = 1
SNAPSHOT_TEMP_PREFIX: str = ".remote-outputs-"
SNAPSHOT_TEMP_SUFFIX: str = ".json.tmp"

DEFAULT_MAX_WORKERS: int = 8
MAX_WORKERS_LIMIT: int = 64
WAIT_POLL_SECONDS: float = 0.1
