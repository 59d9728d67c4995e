"""Utility modules for templating."""

from .console import console
from .filesystem import ensure_directory, force_delete, normalize_path

__all__ = ["console", "ensure_directory", "force_delete", "normalize_path"]
