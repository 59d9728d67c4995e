"""Project handle: base directory, build layout and registered source roots."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..utils.filesystem import normalize_path


@dataclass
class Project:
    basedir: Path
    name: Optional[str] = None
    version: Optional[str] = None
    packaging: str = "jar"
    build_directory: str = "target"
    properties: Dict[str, Any] = field(default_factory=dict)
    compile_source_roots: List[Path] = field(default_factory=list)
    test_compile_source_roots: List[Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.basedir = normalize_path(self.basedir)

    @property
    def build_path(self) -> Path:
        return normalize_path(self.basedir / self.build_directory)

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a possibly relative path against the base directory."""
        return normalize_path(self.basedir / path)

    def add_compile_source_root(self, path: Path) -> None:
        _add_root(self.compile_source_roots, path)

    def add_test_compile_source_root(self, path: Path) -> None:
        _add_root(self.test_compile_source_roots, path)

    def interpolation_context(self) -> Dict[str, Any]:
        """Flat properties made available to the renderer.

        User properties take precedence over the built-in `project.*` values.
        """
        values: Dict[str, Any] = {
            "project.basedir": str(self.basedir),
            "project.build.directory": str(self.build_path),
            "project.packaging": self.packaging,
        }
        if self.name is not None:
            values["project.name"] = self.name
        if self.version is not None:
            values["project.version"] = self.version
        values.update(self.properties)
        return values


def _add_root(roots: List[Path], path: Path) -> None:
    path = normalize_path(path)
    if path not in roots:
        roots.append(path)
