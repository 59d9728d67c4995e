"""Synchronization logic for templating."""

from .fingerprint import file_fingerprint, files_differ
from .synchronizer import sync_directories

__all__ = [
    "file_fingerprint",
    "files_differ",
    "sync_directories",
]
