"""Error kinds raised by templating."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TemplatingError(Exception):
    """Base class for every failure surfaced by templating."""


class ConfigurationError(TemplatingError):
    """Invalid or missing settings, or paths that cannot work together."""


class ProcessingError(TemplatingError):
    """The rendering step failed. The original error is chained as __cause__."""


class TemplatingIOError(TemplatingError):
    """A filesystem operation failed for a specific path."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class UnsupportedEntryError(TemplatingIOError):
    """A tree entry is neither a regular file nor a directory."""
