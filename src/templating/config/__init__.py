"""Configuration management for templating."""

from .settings import (
    SETTINGS_FILE,
    ProjectSettings,
    TemplatingSettings,
    discover_settings_path,
    load_project_settings,
    load_settings,
)

__all__ = [
    "SETTINGS_FILE",
    "ProjectSettings",
    "TemplatingSettings",
    "discover_settings_path",
    "load_project_settings",
    "load_settings",
]
