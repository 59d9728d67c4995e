"""File system utilities."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Union

from ..errors import TemplatingIOError


def normalize_path(path: Union[str, Path]) -> Path:
    """Return an absolute path with `.` and `..` collapsed, without following symlinks."""
    return Path(os.path.abspath(path))


def ensure_directory(directory: Path) -> None:
    """Create a directory and any missing parents."""
    if directory.is_dir():
        return
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TemplatingIOError(
            f"Could not create destination directory '{directory}'.", directory
        ) from e


def force_delete(path: Path) -> None:
    """Delete a file or a whole directory tree; a missing path is fine."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as e:
        raise TemplatingIOError(f"Unable to delete '{path}': {e}", path) from e
