"""Tests for unpacking AARs into the cache and merging them per library key."""

from __future__ import annotations

import logging
import struct
import zipfile
import zlib
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

import pytest

from aarcache.adapters import LocalFileOperations
from aarcache.cache.executor import FetchExecutor
from aarcache.cache.unpacker import Unpacker
from aarcache.model import AarAndJar, LocalArtifact, RemoteArtifact
from aarcache.utils import aar_dir_name, merged_aar_dir_name

T1 = 1_700_000_000_000_000_000


def _item(path: Path, library_key: str, jar: Path | None = None) -> tuple[str, AarAndJar]:
    aar = LocalArtifact(path)
    return aar_dir_name(aar), AarAndJar(aar=aar, jar=LocalArtifact(jar) if jar else None, library_key=library_key)


class _RecordingFileOperations(LocalFileOperations):
    """Records every file write routed through the filesystem port."""

    def __init__(self) -> None:
        self.written: list[Path] = []

    def write_stream(self, destination: Path, stream: BinaryIO) -> None:
        self.written.append(destination)
        super().write_stream(destination, stream)


class _PoisonedFileOperations(LocalFileOperations):
    """Fails writes of files named ``poison.xml`` with a configured error."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def write_stream(self, destination: Path, stream: BinaryIO) -> None:
        if destination.name == "poison.xml":
            raise self.error
        super().write_stream(destination, stream)


def _write_deflated_aar(path: Path, payload: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("res/raw/data.txt", payload)
    return path


def _corrupt_first_member(path: Path) -> None:
    """Flip bytes at the start of the first member's compressed data."""
    with zipfile.ZipFile(path) as archive:
        info = archive.infolist()[0]
    raw = bytearray(path.read_bytes())
    name_len, extra_len = struct.unpack("<HH", raw[info.header_offset + 26 : info.header_offset + 30])
    start = info.header_offset + 30 + name_len + extra_len
    for offset in range(start, start + min(10, info.compress_size)):
        raw[offset] ^= 0xFF
    path.write_bytes(bytes(raw))


@pytest.fixture()
def unpacker(fs: LocalFileOperations, executor: FetchExecutor) -> Unpacker:
    return Unpacker(fs=fs, executor=executor)


def test_unpack_extracts_resources_and_skips_bundled_jars(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    source = make_aar(
        tmp_path / "out" / "libA.aar",
        {"res/values/values.xml": b"<resources/>", "classes.jar": b"jar", "libs/extra.jar": b"jar"},
        mtime_ns=T1,
    )
    key, item = _item(source, "libA")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key: item}, {key}, cache_dir)

    raw_dir = cache_dir / key
    assert stats.unpacked == 1
    assert stats.failed_unpacks == 0
    assert (raw_dir / "res" / "values" / "values.xml").read_bytes() == b"<resources/>"
    assert (raw_dir / "R.txt").is_file()
    assert not (raw_dir / "classes.jar").exists()
    assert not (raw_dir / "libs" / "extra.jar").exists()


def test_unpack_writes_stamp_with_source_mtime(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    source = make_aar(tmp_path / "out" / "libA.aar", mtime_ns=T1)
    key, item = _item(source, "libA")
    cache_dir = tmp_path / "cache"

    unpacker.unpack({key: item}, {key}, cache_dir)

    assert (cache_dir / key / "aar.timestamp").stat().st_mtime_ns == T1


def test_unpack_copies_associated_jar_to_fixed_location(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    source = make_aar(tmp_path / "out" / "libA.aar")
    jar = tmp_path / "out" / "libA_classes.jar"
    jar.write_bytes(b"merged classes")
    key, item = _item(source, "libA", jar=jar)
    cache_dir = tmp_path / "cache"

    unpacker.unpack({key: item}, {key}, cache_dir)

    assert (cache_dir / key / "jars" / "classes_and_libs_merged.jar").read_bytes() == b"merged classes"


def test_unpack_replaces_previous_raw_directory(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    source = make_aar(tmp_path / "out" / "libA.aar", {"res/values/new.xml": b"new"})
    key, item = _item(source, "libA")
    cache_dir = tmp_path / "cache"
    stale = cache_dir / key / "res" / "values" / "old.xml"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    unpacker.unpack({key: item}, {key}, cache_dir)

    assert not stale.exists()
    assert (cache_dir / key / "res" / "values" / "new.xml").read_bytes() == b"new"


def test_unpack_only_touches_updated_keys(tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]) -> None:
    key_a, item_a = _item(make_aar(tmp_path / "out" / "libA.aar"), "libA")
    key_b, item_b = _item(make_aar(tmp_path / "out" / "libB.aar"), "libB")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key_a: item_a, key_b: item_b}, {key_a}, cache_dir)

    assert stats.unpacked == 1
    assert (cache_dir / key_a).is_dir()
    assert not (cache_dir / key_b).exists()


def test_corrupt_archive_does_not_abort_siblings(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path], caplog: pytest.LogCaptureFixture
) -> None:
    good_key, good = _item(make_aar(tmp_path / "out" / "good.aar"), "good")
    broken_path = tmp_path / "out" / "broken.aar"
    broken_path.write_bytes(b"not a zip")
    broken_key, broken = _item(broken_path, "broken")
    cache_dir = tmp_path / "cache"

    with caplog.at_level(logging.WARNING, logger="aarcache.cache.unpacker"):
        stats = unpacker.unpack({good_key: good, broken_key: broken}, {good_key, broken_key}, cache_dir)

    assert stats.unpacked == 1
    assert stats.failed_unpacks == 1
    assert (cache_dir / good_key / "AndroidManifest.xml").is_file()
    assert "Failed to extract AAR" in caplog.text


def test_unfetched_remote_artifact_fails_per_item(tmp_path: Path, unpacker: Unpacker) -> None:
    remote = RemoteArtifact(key="out/libR.aar", digest="d1", local_path=tmp_path / "fetched" / "libR.aar")
    key = aar_dir_name(remote)
    item = AarAndJar(aar=remote, jar=None, library_key="libR")

    stats = unpacker.unpack({key: item}, {key}, tmp_path / "cache")

    assert stats.unpacked == 0
    assert stats.failed_unpacks == 1


def test_fetched_remote_artifact_is_unpacked_with_stamp(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    fetched = make_aar(tmp_path / "fetched" / "libR.aar", {"res/raw/a.txt": b"a"})
    remote = RemoteArtifact(key="out/libR.aar", digest="d1", local_path=fetched)
    key = aar_dir_name(remote)
    item = AarAndJar(aar=remote, jar=None, library_key="libR")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key: item}, {key}, cache_dir)

    assert stats.unpacked == 1
    assert (cache_dir / key / "res" / "raw" / "a.txt").read_bytes() == b"a"
    assert (cache_dir / key / "aar.timestamp").is_file()


def test_unpack_removes_stray_non_aar_entries(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    key, item = _item(make_aar(tmp_path / "out" / "libA.aar"), "libA")
    cache_dir = tmp_path / "cache"
    leftover = cache_dir / "old_1.mergedaar" / "res"
    leftover.mkdir(parents=True)
    (cache_dir / "junk.txt").write_text("x", encoding="utf-8")

    stats = unpacker.unpack({key: item}, set(), cache_dir)

    assert stats.removed_strays == 2
    assert not (cache_dir / "old_1.mergedaar").exists()
    assert not (cache_dir / "junk.txt").exists()
    assert not (cache_dir / merged_aar_dir_name("libA")).exists()


def test_merge_produces_union_of_raw_directories(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    key_a, item_a = _item(make_aar(tmp_path / "out" / "a" / "first.aar", {"res/values/a.xml": b"a"}), "pkg")
    key_b, item_b = _item(make_aar(tmp_path / "out" / "b" / "second.aar", {"res/layout/b.xml": b"b"}), "pkg")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key_a: item_a, key_b: item_b}, {key_a, key_b}, cache_dir)

    merged = cache_dir / merged_aar_dir_name("pkg")
    assert stats.merged_libraries == 1
    assert (merged / "res" / "values" / "a.xml").read_bytes() == b"a"
    assert (merged / "res" / "layout" / "b.xml").read_bytes() == b"b"
    assert (merged / "AndroidManifest.xml").is_file()
    assert (merged / "aar.timestamp").is_file()
    # Manifest, R.txt and the stamp exist in both inputs; each is copied once.
    assert stats.skipped_files == 3
    assert stats.failed_copies == 0


def test_merge_keeps_first_writer_for_conflicting_resources(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path], caplog: pytest.LogCaptureFixture
) -> None:
    key_a, item_a = _item(make_aar(tmp_path / "out" / "a" / "first.aar", {"res/values/v.xml": b"first"}), "pkg")
    key_b, item_b = _item(make_aar(tmp_path / "out" / "b" / "second.aar", {"res/values/v.xml": b"second"}), "pkg")
    cache_dir = tmp_path / "cache"

    with caplog.at_level(logging.INFO, logger="aarcache.cache.unpacker"):
        unpacker.unpack({key_a: item_a, key_b: item_b}, {key_a, key_b}, cache_dir)

    merged_file = cache_dir / merged_aar_dir_name("pkg") / "res" / "values" / "v.xml"
    assert merged_file.read_bytes() in {b"first", b"second"}
    assert "since file already exists" in caplog.text
    assert "AndroidManifest.xml since file already exists" not in caplog.text


def test_merge_covers_declared_items_that_were_not_updated(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    key_a, item_a = _item(make_aar(tmp_path / "out" / "a" / "first.aar", {"res/values/a.xml": b"a"}), "pkg")
    key_b, item_b = _item(make_aar(tmp_path / "out" / "b" / "second.aar", {"res/values/b.xml": b"b"}), "pkg")
    cache_dir = tmp_path / "cache"
    to_cache = {key_a: item_a, key_b: item_b}
    unpacker.unpack(to_cache, {key_a, key_b}, cache_dir)

    unpacker.unpack(to_cache, {key_b}, cache_dir)

    merged = cache_dir / merged_aar_dir_name("pkg")
    assert (merged / "res" / "values" / "a.xml").is_file()
    assert (merged / "res" / "values" / "b.xml").is_file()


def test_merge_groups_by_library_key(tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]) -> None:
    key_a, item_a = _item(make_aar(tmp_path / "out" / "libA.aar", {"res/values/a.xml": b"a"}), "libA")
    key_b, item_b = _item(make_aar(tmp_path / "out" / "libB.aar", {"res/values/b.xml": b"b"}), "libB")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key_a: item_a, key_b: item_b}, {key_a, key_b}, cache_dir)

    assert stats.merged_libraries == 2
    assert not (cache_dir / merged_aar_dir_name("libA") / "res" / "values" / "b.xml").exists()
    assert (cache_dir / merged_aar_dir_name("libB") / "res" / "values" / "b.xml").is_file()


def test_corrupt_deflate_stream_does_not_abort_siblings(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path], caplog: pytest.LogCaptureFixture
) -> None:
    good_key, good = _item(make_aar(tmp_path / "out" / "good.aar"), "good")
    broken_path = _write_deflated_aar(tmp_path / "out" / "broken.aar", b"resource line\n" * 4096)
    _corrupt_first_member(broken_path)
    broken_key, broken = _item(broken_path, "broken")
    cache_dir = tmp_path / "cache"

    with caplog.at_level(logging.WARNING, logger="aarcache.cache.unpacker"):
        stats = unpacker.unpack({good_key: good, broken_key: broken}, {good_key, broken_key}, cache_dir)

    assert stats.unpacked == 1
    assert stats.failed_unpacks == 1
    assert not (cache_dir / broken_key / "aar.timestamp").exists()
    assert (cache_dir / merged_aar_dir_name("good") / "AndroidManifest.xml").is_file()
    assert "Failed to extract AAR" in caplog.text


@pytest.mark.parametrize(
    "error",
    [
        zlib.error("invalid code lengths set"),
        EOFError("truncated member"),
        RuntimeError("encrypted member"),
        NotImplementedError("unsupported compression"),
    ],
)
def test_extraction_errors_fail_per_item(
    tmp_path: Path, executor: FetchExecutor, make_aar: Callable[..., Path], error: Exception
) -> None:
    unpacker = Unpacker(fs=_PoisonedFileOperations(error), executor=executor)
    good_key, good = _item(make_aar(tmp_path / "out" / "good.aar"), "good")
    bad_key, bad = _item(make_aar(tmp_path / "out" / "bad.aar", {"res/values/poison.xml": b"x"}), "bad")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({good_key: good, bad_key: bad}, {good_key, bad_key}, cache_dir)

    assert stats.unpacked == 1
    assert stats.failed_unpacks == 1
    assert (cache_dir / merged_aar_dir_name("good") / "R.txt").is_file()


def test_unpack_writes_through_filesystem_port(
    tmp_path: Path, executor: FetchExecutor, make_aar: Callable[..., Path]
) -> None:
    fs = _RecordingFileOperations()
    source = make_aar(tmp_path / "out" / "libA.aar", {"res/values/values.xml": b"<resources/>"})
    jar = tmp_path / "out" / "libA_classes.jar"
    jar.write_bytes(b"merged classes")
    key, item = _item(source, "libA", jar=jar)
    cache_dir = tmp_path / "cache"

    Unpacker(fs=fs, executor=executor).unpack({key: item}, {key}, cache_dir)

    raw_dir = cache_dir / key
    assert set(fs.written) == {
        raw_dir / "AndroidManifest.xml",
        raw_dir / "R.txt",
        raw_dir / "res" / "values" / "values.xml",
        raw_dir / "aar.timestamp",
        raw_dir / "jars" / "classes_and_libs_merged.jar",
    }


def test_unpack_keeps_traversing_members_inside_entry(
    tmp_path: Path, unpacker: Unpacker, make_aar: Callable[..., Path]
) -> None:
    source = make_aar(tmp_path / "out" / "libA.aar", {"../escape.txt": b"x", "/abs/inside.txt": b"y"})
    key, item = _item(source, "libA")
    cache_dir = tmp_path / "cache"

    stats = unpacker.unpack({key: item}, {key}, cache_dir)

    assert stats.unpacked == 1
    assert not (cache_dir / "escape.txt").exists()
    assert (cache_dir / key / "escape.txt").read_bytes() == b"x"
    assert (cache_dir / key / "abs" / "inside.txt").read_bytes() == b"y"
