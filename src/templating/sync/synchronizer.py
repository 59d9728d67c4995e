"""Incremental merge of a rendered staging tree into a persistent output tree."""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError, TemplatingIOError, UnsupportedEntryError
from ..utils.filesystem import ensure_directory, normalize_path
from .fingerprint import files_differ


def sync_directories(
    source: Optional[Path], destination: Optional[Path], exclude_root: Optional[Path]
) -> int:
    """Merge `source` into `destination` and return how many files were copied.

    Files are copied only when their content differs from the destination copy.
    Entries present only in `destination` are left alone, and `exclude_root` is
    never entered or copied even when it shows up inside `source`.
    """
    if source is None:
        raise ConfigurationError("source directory can't be null.")
    if destination is None:
        raise ConfigurationError("destination directory can't be null.")

    source = normalize_path(source)
    destination = normalize_path(destination)
    if source == destination:
        raise ConfigurationError("source and destination are the same directory.")
    if not source.is_dir():
        raise ConfigurationError(f"Source directory doesn't exists ({source}).")

    excluded = normalize_path(exclude_root) if exclude_root is not None else None
    return _sync_tree(source, destination, excluded)


def _sync_tree(source_dir: Path, destination_dir: Path, excluded: Optional[Path]) -> int:
    copied = 0
    try:
        children = sorted(source_dir.iterdir())
    except OSError as e:
        raise TemplatingIOError(f"Unable to list '{source_dir}': {e}", source_dir) from e

    for child in children:
        if child == excluded:
            # never copy the output directory into itself
            continue

        target = destination_dir / child.name
        mode = _entry_mode(child)

        if stat.S_ISREG(mode):
            if files_differ(child, target):
                _copy_file(child, target)
                copied += 1
        elif stat.S_ISDIR(mode):
            ensure_directory(target)
            copied += _sync_tree(child, target, excluded)
        else:
            raise UnsupportedEntryError(f"Unknown file type: {child}", child)

    return copied


def _entry_mode(path: Path) -> int:
    try:
        return path.lstat().st_mode
    except OSError as e:
        raise TemplatingIOError(f"Unable to stat '{path}': {e}", path) from e


def _copy_file(source: Path, target: Path) -> None:
    """Replace `target` with a copy of `source` without exposing a half-written file."""
    ensure_directory(target.parent)
    tmp: Optional[Path] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        os.close(fd)
        tmp = Path(tmp_name)
        shutil.copy2(source, tmp)
        os.replace(tmp, target)
    except OSError as e:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        raise TemplatingIOError(f"Unable to copy '{source}' to '{target}': {e}", target) from e
