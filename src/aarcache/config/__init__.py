"""Configuration loading, validation, and fingerprinting for aarcache."""

from __future__ import annotations

from aarcache.config.fingerprint import config_fingerprint
from aarcache.config.loader import load_config
from aarcache.config.model import AarCacheConfig
from aarcache.config.validator import _suggest_key, validate_config_file

__all__ = [
    "AarCacheConfig",
    "_suggest_key",
    "config_fingerprint",
    "load_config",
    "validate_config_file",
]
