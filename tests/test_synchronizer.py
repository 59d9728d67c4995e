from __future__ import annotations

import os
from pathlib import Path

import pytest

import templating.sync.fingerprint as fingerprint_mod
import templating.sync.synchronizer as synchronizer_mod
from helpers import read_tree, write_tree
from templating.errors import ConfigurationError, TemplatingIOError, UnsupportedEntryError
from templating.sync import sync_directories


def test_copies_new_tree_into_missing_destination(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "X", "sub/b.txt": "Y"})

    copied = sync_directories(staging, dest, dest)

    assert copied == 2
    assert read_tree(dest) == {"a.txt": "X", "sub/b.txt": "Y"}
    # the source tree is left as it was
    assert read_tree(staging) == {"a.txt": "X", "sub/b.txt": "Y"}


def test_second_sync_copies_nothing(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "X", "sub/b.txt": "Y", "sub/deeper/c.txt": "Z"})

    assert sync_directories(staging, dest, dest) == 3
    first = read_tree(dest)
    assert sync_directories(staging, dest, dest) == 0
    assert read_tree(dest) == first


def test_only_changed_file_is_copied(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "X", "sub/b.txt": "Y", "c.txt": "Z"})
    sync_directories(staging, dest, dest)
    a_mtime = (dest / "a.txt").stat().st_mtime_ns

    # same length, different bytes
    (staging / "sub" / "b.txt").write_text("W")

    assert sync_directories(staging, dest, dest) == 1
    assert (dest / "sub" / "b.txt").read_text() == "W"
    assert (dest / "a.txt").stat().st_mtime_ns == a_mtime


def test_destination_only_files_are_kept(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "X"})
    write_tree(dest, {"stale.txt": "old", "gone/deep.txt": "older"})

    sync_directories(staging, dest, dest)

    assert read_tree(dest) == {"a.txt": "X", "gone/deep.txt": "older", "stale.txt": "old"}


def test_excluded_destination_inside_source_is_not_entered(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = staging / "out"
    write_tree(staging, {"a.txt": "X", "sub/b.txt": "Y"})

    assert sync_directories(staging, dest, dest) == 2
    assert read_tree(dest) == {"a.txt": "X", "sub/b.txt": "Y"}
    assert not (dest / "out").exists()

    assert sync_directories(staging, dest, dest) == 0
    assert not (dest / "out").exists()


def test_excluded_root_deeper_in_tree_is_skipped(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"keep/a.txt": "X", "keep/skip/b.txt": "Y"})

    copied = sync_directories(staging, dest, staging / "keep" / "skip")

    assert copied == 1
    assert read_tree(dest) == {"keep/a.txt": "X"}


def test_same_source_and_destination_is_rejected(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    write_tree(staging, {"a.txt": "X"})
    before = read_tree(staging)

    with pytest.raises(ConfigurationError):
        sync_directories(staging, tmp_path / "other" / ".." / "staging", staging)

    assert read_tree(staging) == before
    assert [p.name for p in staging.iterdir()] == ["a.txt"]


def test_missing_or_null_source_is_rejected(tmp_path: Path) -> None:
    dest = tmp_path / "out"
    with pytest.raises(ConfigurationError):
        sync_directories(tmp_path / "missing", dest, dest)
    with pytest.raises(ConfigurationError):
        sync_directories(None, dest, dest)
    with pytest.raises(ConfigurationError):
        sync_directories(tmp_path, None, None)
    assert not dest.exists()


def test_symlink_entry_is_unsupported(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "X"})
    os.symlink(staging / "a.txt", staging / "link.txt")

    with pytest.raises(UnsupportedEntryError) as exc_info:
        sync_directories(staging, dest, dest)
    assert exc_info.value.path == staging / "link.txt"


def test_directory_blocked_by_file_fails_with_path(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"sub/b.txt": "Y"})
    write_tree(dest, {"sub": "not a directory"})

    with pytest.raises(TemplatingIOError) as exc_info:
        sync_directories(staging, dest, dest)
    assert exc_info.value.path == dest / "sub"


def test_copy_leaves_no_temporary_files(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "new"})
    write_tree(dest, {"a.txt": "old"})

    assert sync_directories(staging, dest, dest) == 1
    assert sorted(p.name for p in dest.iterdir()) == ["a.txt"]
    assert (dest / "a.txt").read_text() == "new"


def test_failed_copy_removes_temporary_file(tmp_path: Path, monkeypatch) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "new"})
    write_tree(dest, {"a.txt": "old"})

    def failing_copy2(src, dst, *args, **kwargs):
        Path(dst).write_text("partial")
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(synchronizer_mod.shutil, "copy2", failing_copy2)

    with pytest.raises(TemplatingIOError) as exc_info:
        sync_directories(staging, dest, dest)

    assert exc_info.value.path == dest / "a.txt"
    assert sorted(p.name for p in dest.iterdir()) == ["a.txt"]
    assert (dest / "a.txt").read_text() == "old"


def test_unreadable_destination_is_replaced(tmp_path: Path, monkeypatch) -> None:
    staging = tmp_path / "staging"
    dest = tmp_path / "out"
    write_tree(staging, {"a.txt": "same"})
    write_tree(dest, {"a.txt": "same"})
    real_access = os.access

    def access(path, mode, *args, **kwargs):
        if Path(path) == dest / "a.txt":
            return False
        return real_access(path, mode, *args, **kwargs)

    monkeypatch.setattr(fingerprint_mod.os, "access", access)

    assert sync_directories(staging, dest, dest) == 1
    assert (dest / "a.txt").read_text() == "same"
