"""Deterministic naming of cache directories and their well-known children."""

from __future__ import annotations

import hashlib
from pathlib import Path, PurePosixPath

from aarcache.constants.cache import (
    DOT_AAR,
    DOT_MERGED_AAR,
    JARS_DIR_NAME,
    MERGED_JAR_FILENAME,
    RES_DIR_NAME,
)
from aarcache.constants.naming import NAME_HASH_HEX_LENGTH, UNSAFE_NAME_CHAR_PATTERN
from aarcache.model import Artifact, LocalArtifact, RemoteArtifact


def stable_hash(key: str) -> int:
    """Return a 32-bit hash of ``key`` that is stable across processes."""
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return int(digest[:NAME_HASH_HEX_LENGTH], 16)


def generate_aar_directory_name(name: str, hash_code: int) -> str:
    return f"{name}_{hash_code:x}"


def artifact_key(artifact: Artifact) -> str:
    """Return the identity key of an artifact."""
    if isinstance(artifact, RemoteArtifact):
        return artifact.key
    if isinstance(artifact, LocalArtifact):
        return str(artifact.path)
    raise TypeError(f"Unhandled artifact type: {type(artifact).__name__}")


def aar_dir_name(artifact: Artifact) -> str:
    """Return the raw cache entry name for an AAR artifact.

    The readable part is the key's file name without extension; the hash covers
    the whole key so equally named AARs from different packages do not collide.
    """
    key = artifact_key(artifact)
    name = PurePosixPath(key.replace("\\", "/")).stem
    return generate_aar_directory_name(name, stable_hash(key)) + DOT_AAR


def merged_aar_dir_name(library_key: str) -> str:
    """Return the merged cache entry name for a library key."""
    name = UNSAFE_NAME_CHAR_PATTERN.sub("_", library_key)
    return generate_aar_directory_name(name, stable_hash(library_key)) + DOT_MERGED_AAR


def jar_file(aar_dir: Path) -> Path:
    return aar_dir / JARS_DIR_NAME / MERGED_JAR_FILENAME


def res_dir(aar_dir: Path) -> Path:
    return aar_dir / RES_DIR_NAME
