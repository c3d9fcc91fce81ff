"""Patterns and sizes used when deriving cache entry names."""

from __future__ import annotations

import re

NAME_HASH_HEX_LENGTH: int = 8
UNSAFE_NAME_CHAR_PATTERN: re.Pattern[str] = re.compile(r"[^A-Za-z0-9._+-]")
