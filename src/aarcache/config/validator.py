"""Config file validation for aarcache."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import yaml

from aarcache.constants.config import CONFIG_FILENAME, MAX_WORKERS_LIMIT
from aarcache.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    ALLOWED_LIBRARY_KEYS,
    ALLOWED_REMOTE_OUTPUT_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    LIST_OF_STRINGS_KEYS,
    REQUIRED_LIBRARY_KEYS,
    REQUIRED_REMOTE_OUTPUT_KEYS,
    STRING_KEYS,
)
from aarcache.exceptions.validation import ValidationError


def validate_config_file(
    root: Path,
    config_path: Path | None = None,
    *,
    config_explicit: bool = False,
) -> list[ValidationError]:
    """Validate an aarcache.yaml file and return all validation errors.

    This is the collect-all entry point used by both ``aarcache validate-config``
    and ``aarcache sync`` preflight.  It never raises; all problems are returned
    as :class:`ValidationError` instances.
    """
    errors: list[ValidationError] = []
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    path_str = str(path)

    if not path.exists():
        if config_explicit:
            errors.append(
                ValidationError(
                    code=CFG001,
                    path=path_str,
                    field="",
                    message=f"config file not found: {path}",
                )
            )
        return errors

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        errors.append(
            ValidationError(
                code=CFG002,
                path=path_str,
                field="",
                message=f"invalid YAML: {exc}",
            )
        )
        return errors

    if raw is None:
        return errors

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a YAML mapping, got {type(raw).__name__}",
            )
        )
        return errors

    for key in sorted(raw.keys(), key=str):
        if key not in ALLOWED_CONFIG_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=str(key),
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(str(key), ALLOWED_CONFIG_KEYS),
                )
            )

    for key in STRING_KEYS:
        if key in raw:
            val = raw[key]
            if not isinstance(val, str) or not val.strip():
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=key,
                        message=f"invalid type for `{key}`",
                        hint="expected a non-empty string",
                    )
                )

    if "max_workers" in raw:
        val = raw["max_workers"]
        if isinstance(val, bool) or not isinstance(val, int):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field="max_workers",
                    message="invalid type for `max_workers`",
                    hint="expected a positive integer",
                )
            )
        elif val <= 0 or val > MAX_WORKERS_LIMIT:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field="max_workers",
                    message=f"`max_workers` must be between 1 and {MAX_WORKERS_LIMIT}, got {val}",
                )
            )

    for key in LIST_OF_STRINGS_KEYS:
        if key in raw:
            val = raw[key]
            if val is not None and (not isinstance(val, (list, tuple)) or not all(isinstance(i, str) for i in val)):
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=key,
                        message=f"invalid type for `{key}`",
                        hint="expected a list of strings",
                    )
                )

    _validate_entries_block(
        raw,
        path_str,
        errors,
        block="libraries",
        allowed=ALLOWED_LIBRARY_KEYS,
        required=REQUIRED_LIBRARY_KEYS,
        unique_field="aar",
    )
    _validate_entries_block(
        raw,
        path_str,
        errors,
        block="remote_outputs",
        allowed=ALLOWED_REMOTE_OUTPUT_KEYS,
        required=REQUIRED_REMOTE_OUTPUT_KEYS,
        unique_field="key",
    )

    return errors


def _validate_entries_block(
    raw: dict[str, Any],
    path_str: str,
    errors: list[ValidationError],
    *,
    block: str,
    allowed: frozenset[str],
    required: tuple[str, ...],
    unique_field: str,
) -> None:
    """Validate a list-of-mappings block such as ``libraries`` or ``remote_outputs``."""
    if block not in raw:
        return
    entries = raw[block]
    if entries is None:
        return
    if not isinstance(entries, (list, tuple)):
        errors.append(
            ValidationError(
                code=CFG005,
                path=path_str,
                field=block,
                message=f"invalid type for `{block}`",
                hint="expected a list of mappings",
            )
        )
        return

    seen: dict[str, int] = {}
    for index, entry in enumerate(entries):
        field_prefix = f"{block}[{index}]"
        if not isinstance(entry, dict):
            errors.append(
                ValidationError(
                    code=CFG005,
                    path=path_str,
                    field=field_prefix,
                    message=f"`{field_prefix}` must be a mapping",
                )
            )
            continue

        for key in sorted(entry.keys(), key=str):
            if key not in allowed:
                errors.append(
                    ValidationError(
                        code=CFG004,
                        path=path_str,
                        field=f"{field_prefix}.{key}",
                        message=f"unknown key `{key}` in `{block}`",
                        hint=_suggest_key(str(key), allowed),
                    )
                )

        for key in sorted(allowed):
            val = entry.get(key)
            if val is None and key not in required:
                continue
            if not isinstance(val, str) or not val.strip():
                errors.append(
                    ValidationError(
                        code=CFG005,
                        path=path_str,
                        field=f"{field_prefix}.{key}",
                        message=(
                            f"missing required field `{key}`" if key not in entry else f"invalid type for `{key}`"
                        ),
                        hint="expected a non-empty string",
                    )
                )

        unique_value = entry.get(unique_field)
        if isinstance(unique_value, str) and unique_value.strip():
            normalized = unique_value.strip()
            if normalized in seen:
                errors.append(
                    ValidationError(
                        code=CFG007,
                        path=path_str,
                        field=f"{field_prefix}.{unique_field}",
                        message=f"`{normalized}` is already declared by `{block}[{seen[normalized]}]`",
                    )
                )
            else:
                seen[normalized] = index


def _suggest_key(unknown: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean ...' hint for a close key match, or empty string."""
    matches = difflib.get_close_matches(unknown, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
