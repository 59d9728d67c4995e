"""Materialization of template sources into generated source roots."""

from .orchestrator import (
    STAGING_DIRECTORY,
    MaterializationResult,
    MaterializationStatus,
    SourceMaterializer,
    SourceScope,
)

__all__ = [
    "STAGING_DIRECTORY",
    "MaterializationResult",
    "MaterializationStatus",
    "SourceMaterializer",
    "SourceScope",
]
