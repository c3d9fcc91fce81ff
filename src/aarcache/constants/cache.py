"""On-disk layout constants for the unpacked AAR cache."""

from __future__ import annotations

DOT_AAR: str = ".aar"
DOT_MERGED_AAR: str = ".mergedaar"
DOT_JAR: str = ".jar"

STAMP_FILE_NAME: str = "aar.timestamp"
ANDROID_MANIFEST_FILENAME: str = "AndroidManifest.xml"

JARS_DIR_NAME: str = "jars"
RES_DIR_NAME: str = "res"
# Fixed name; the source jar name is not known at unpack time.
MERGED_JAR_FILENAME: str = "classes_and_libs_merged.jar"

# Files expected to collide when several raw entries are merged into one directory.
MERGE_EXPECTED_DUPLICATES: frozenset[str] = frozenset({STAMP_FILE_NAME, ANDROID_MANIFEST_FILENAME})

COPY_CHUNK_SIZE: int = 1024 * 1024
