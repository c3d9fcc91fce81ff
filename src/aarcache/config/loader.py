"""Config loading and normalization for aarcache."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from aarcache.config.model import AarCacheConfig
from aarcache.constants.config import CONFIG_FILENAME, DEFAULT_CACHE_DIR, DEFAULT_MAX_WORKERS, MAX_WORKERS_LIMIT
from aarcache.exceptions import ConfigError
from aarcache.types import LibraryConfig, RemoteOutputConfig


def load_config(root: Path, config_path: Path | None = None) -> AarCacheConfig:
    """Load and validate cache config from ``aarcache.yaml`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return AarCacheConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    project_name = raw.get("project_name")
    if project_name is not None and (not isinstance(project_name, str) or not project_name.strip()):
        raise ConfigError("project_name must be a non-empty string")

    cache_dir = raw.get("cache_dir", DEFAULT_CACHE_DIR)
    if not isinstance(cache_dir, str) or not cache_dir.strip():
        raise ConfigError("cache_dir must be a non-empty string")

    max_workers = raw.get("max_workers", DEFAULT_MAX_WORKERS)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers <= 0:
        raise ConfigError("max_workers must be a positive integer")
    if max_workers > MAX_WORKERS_LIMIT:
        raise ConfigError(f"max_workers must be at most {MAX_WORKERS_LIMIT}, got {max_workers}")

    return AarCacheConfig(
        project_name=project_name.strip() if project_name else None,
        cache_dir=cache_dir,
        max_workers=max_workers,
        excluded_libraries=tuple(_ensure_string_list(raw.get("excluded_libraries", []), "excluded_libraries")),
        libraries=_build_libraries(raw.get("libraries", [])),
        remote_outputs=_build_remote_outputs(raw.get("remote_outputs", [])),
    )


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return list(value)


def _ensure_mapping_list(value: Any, key_name: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, dict) for item in value):
        raise ConfigError(f"{key_name} must be a list of mappings")
    return list(value)


def _required_string(entry: dict[str, Any], field: str, key_name: str) -> str:
    value = entry.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key_name}.{field} must be a non-empty string")
    return value.strip()


def _build_libraries(raw: Any) -> tuple[LibraryConfig, ...]:
    """Build library declarations; each AAR location may be declared only once."""
    libraries: list[LibraryConfig] = []
    seen_aars: set[str] = set()
    for index, entry in enumerate(_ensure_mapping_list(raw, "libraries")):
        key_name = f"libraries[{index}]"
        aar = _required_string(entry, "aar", key_name)
        if aar in seen_aars:
            raise ConfigError(f"{key_name}.aar duplicates an earlier declaration: {aar}")
        seen_aars.add(aar)
        jar = entry.get("jar")
        if jar is not None and (not isinstance(jar, str) or not jar.strip()):
            raise ConfigError(f"{key_name}.jar must be a non-empty string")
        libraries.append(
            LibraryConfig(
                key=_required_string(entry, "key", key_name),
                aar=aar,
                jar=jar.strip() if jar else None,
            )
        )
    return tuple(libraries)


def _build_remote_outputs(raw: Any) -> tuple[RemoteOutputConfig, ...]:
    outputs: dict[str, RemoteOutputConfig] = {}
    for index, entry in enumerate(_ensure_mapping_list(raw, "remote_outputs")):
        key_name = f"remote_outputs[{index}]"
        key = _required_string(entry, "key", key_name)
        if key in outputs:
            raise ConfigError(f"{key_name}.key duplicates an earlier declaration: {key}")
        outputs[key] = RemoteOutputConfig(
            key=key,
            digest=_required_string(entry, "digest", key_name),
            path=_required_string(entry, "path", key_name),
        )
    return tuple(outputs.values())
