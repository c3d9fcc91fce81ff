"""Config fingerprinting for sync reports."""

from __future__ import annotations

import hashlib
import json

from aarcache.config.model import AarCacheConfig


def config_fingerprint(config: AarCacheConfig) -> str:
    """Return a stable hash fingerprint of the effective config."""
    payload = {
        "project_name": config.project_name,
        "cache_dir": config.cache_dir,
        "max_workers": config.max_workers,
        "excluded_libraries": sorted(config.excluded_libraries),
        "libraries": sorted(
            (library.key, library.aar, library.jar or "") for library in config.libraries
        ),
        "remote_outputs": sorted(
            (output.key, output.digest, output.path) for output in config.remote_outputs
        ),
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()
