"""Templating settings loaded from `templating.yml`.

Discovery walks up from a start directory looking for `templating.yml`. When
no file is found the defaults below apply, which match the conventional
`src/main/java-templates` layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, TypedDict, cast

import yaml

from ..errors import ConfigurationError
from ..project import Project

SETTINGS_FILE = "templating.yml"


class ProjectSettings(TypedDict, total=False):
    """Project section of the settings file."""

    name: str
    version: str
    packaging: str  # jar, pom, ...
    build_directory: str  # target


@dataclass
class TemplatingSettings:
    source_directory: Optional[str] = "src/main/java-templates"
    output_directory: Optional[str] = None
    test_source_directory: Optional[str] = "src/test/java-templates"
    test_output_directory: Optional[str] = None
    encoding: Optional[str] = None
    escape_string: Optional[str] = None
    delimiters: List[Optional[str]] = field(default_factory=list)
    use_default_delimiters: bool = True
    overwrite: bool = False
    skip_poms: bool = True
    # file extensions copied without interpolation; None keeps the renderer default
    non_filtered_extensions: Optional[List[str]] = None
    project: ProjectSettings = field(default_factory=lambda: ProjectSettings())
    properties: Dict[str, Any] = field(default_factory=dict)

    def resolved_output_directory(self) -> str:
        build = self.project.get("build_directory", "target")
        return self.output_directory or f"{build}/generated-sources/java-templates"

    def resolved_test_output_directory(self) -> str:
        build = self.project.get("build_directory", "target")
        return self.test_output_directory or f"{build}/generated-test-sources/java-templates"

    def create_project(self, basedir: Path) -> Project:
        return Project(
            basedir=basedir,
            name=self.project.get("name"),
            version=self.project.get("version"),
            packaging=self.project.get("packaging", "jar"),
            build_directory=self.project.get("build_directory", "target"),
            properties=dict(self.properties),
        )


_OPTIONAL_STR_KEYS = (
    "source_directory",
    "output_directory",
    "test_source_directory",
    "test_output_directory",
    "encoding",
    "escape_string",
)
_BOOL_KEYS = ("use_default_delimiters", "overwrite", "skip_poms")
_PROJECT_KEYS = ("name", "version", "packaging", "build_directory")


def _parse_settings_dict(data: Dict[str, object]) -> TemplatingSettings:
    known = {f.name for f in fields(TemplatingSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key in _OPTIONAL_STR_KEYS:
        if key in data:
            value = data[key]
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"'{key}' must be a string, got {value!r}")
            values[key] = value

    for key in _BOOL_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, bool):
                raise ConfigurationError(f"'{key}' must be true or false, got {value!r}")
            values[key] = value

    if "delimiters" in data:
        delimiters = data["delimiters"] or []
        if not isinstance(delimiters, list):
            raise ConfigurationError("'delimiters' must be a list")
        for delim in delimiters:
            # null entries are kept; they stand for the standard ${*} pair
            if delim is not None and not isinstance(delim, str):
                raise ConfigurationError(f"Delimiter must be a string, got {delim!r}")
        values["delimiters"] = list(delimiters)

    if "non_filtered_extensions" in data:
        extensions = data["non_filtered_extensions"]
        if extensions is not None:
            if not isinstance(extensions, list) or not all(
                isinstance(ext, str) for ext in extensions
            ):
                raise ConfigurationError("'non_filtered_extensions' must be a list of strings")
            extensions = [ext.lstrip(".").lower() for ext in extensions]
        values["non_filtered_extensions"] = extensions

    if "project" in data:
        project = data["project"] or {}
        if not isinstance(project, dict):
            raise ConfigurationError("'project' must be a mapping")
        for k, v in project.items():
            if k not in _PROJECT_KEYS:
                raise ConfigurationError(f"Unknown project setting: {k}")
            if not isinstance(v, str):
                # unquoted `version: 1.10` would otherwise arrive as the float 1.1
                raise ConfigurationError(
                    f"Project setting '{k}' must be a string, got {v!r}; quote it in YAML"
                )
        values["project"] = cast(ProjectSettings, project)

    if "properties" in data:
        properties = data["properties"] or {}
        if not isinstance(properties, dict):
            raise ConfigurationError("'properties' must be a mapping")
        values["properties"] = {str(k): v for k, v in properties.items()}

    return TemplatingSettings(**values)


def load_settings(path: Path) -> TemplatingSettings:
    """Load settings from a YAML file path."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Unable to read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    return _parse_settings_dict(data)


def discover_settings_path(start: Path) -> Optional[Path]:
    """Return the nearest `templating.yml` at or above `start`, if any."""
    start = start.resolve()
    for parent in (start, *start.parents):
        candidate = parent / SETTINGS_FILE
        if candidate.is_file():
            return candidate
    return None


def load_project_settings(
    project_dir: Path, config_path: Optional[Path] = None
) -> TemplatingSettings:
    """Load explicit settings, or discovered ones, or the defaults."""
    path = config_path or discover_settings_path(project_dir)
    if path is None:
        return TemplatingSettings()
    return load_settings(path)
