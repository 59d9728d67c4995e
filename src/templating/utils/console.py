"""Shared rich console used for all user-facing output."""

from __future__ import annotations

from rich.console import Console

# Messages carry arbitrary file paths, so markup is off; use style= instead.
console = Console(highlight=False, markup=False, soft_wrap=True)
