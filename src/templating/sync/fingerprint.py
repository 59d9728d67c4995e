"""Content fingerprints used to detect changed files between runs."""

from __future__ import annotations

import os
import zlib
from pathlib import Path

from ..errors import TemplatingIOError

CHECKSUM_BUFFER = 4096


def file_fingerprint(path: Path, chunk_size: int = CHECKSUM_BUFFER) -> int:
    """Return the CRC-32 of a file's bytes, reading it in bounded chunks.

    The checksum only answers "did this change?"; it is not an integrity check.
    """
    crc = 0
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                crc = zlib.crc32(chunk, crc)
    except OSError as e:
        raise TemplatingIOError(f"Unable to read '{path}': {e.strerror or e}", path) from e
    return crc & 0xFFFFFFFF


def files_differ(source: Path, target: Path) -> bool:
    """Return True when `target` is missing, unreadable, or has different content."""
    if not target.is_file() or not os.access(target, os.R_OK):
        return True
    return file_fingerprint(source) != file_fingerprint(target)
