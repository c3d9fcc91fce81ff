"""Shared helper utilities."""

from .naming import (
    aar_dir_name,
    artifact_key,
    generate_aar_directory_name,
    jar_file,
    merged_aar_dir_name,
    res_dir,
    stable_hash,
)

__all__ = [
    "aar_dir_name",
    "artifact_key",
    "generate_aar_directory_name",
    "jar_file",
    "merged_aar_dir_name",
    "res_dir",
    "stable_hash",
]
