"""Render template sources, merge them into the output tree and register it."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..config import TemplatingSettings
from ..errors import ConfigurationError, ProcessingError
from ..project import Project
from ..sync import sync_directories
from ..templates import (
    DelimiterPair,
    Renderer,
    RenderingError,
    RenderRequest,
    resolve_delimiters,
)
from ..utils import console, force_delete, normalize_path

STAGING_DIRECTORY = "templates-tmp"


class SourceScope(str, enum.Enum):
    """Which source set the generated sources are added to."""

    MAIN = "main"
    TEST = "test"


class MaterializationStatus(str, enum.Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"  # excluded project packaging
    MISSING = "missing"  # no source directory, nothing to do


@dataclass(frozen=True)
class MaterializationResult:
    status: MaterializationStatus
    copied: int = 0
    output_directory: Optional[Path] = None


class SourceMaterializer:
    """Runs one materialization of template sources for a project."""

    def __init__(
        self,
        settings: TemplatingSettings,
        project: Project,
        renderer: Renderer,
        scope: SourceScope = SourceScope.MAIN,
        verbose: bool = False,
    ) -> None:
        self.settings = settings
        self.project = project
        self.renderer = renderer
        self.scope = scope
        self.verbose = verbose

    @property
    def source_directory(self) -> Optional[Path]:
        raw = (
            self.settings.source_directory
            if self.scope is SourceScope.MAIN
            else self.settings.test_source_directory
        )
        return self.project.resolve(raw) if raw else None

    @property
    def output_directory(self) -> Path:
        raw = (
            self.settings.resolved_output_directory()
            if self.scope is SourceScope.MAIN
            else self.settings.resolved_test_output_directory()
        )
        return self.project.resolve(raw)

    @property
    def staging_directory(self) -> Path:
        return normalize_path(self.project.build_path / STAGING_DIRECTORY)

    def resolve_delimiters(self) -> Tuple[DelimiterPair, ...]:
        return resolve_delimiters(
            self.settings.use_default_delimiters,
            self.settings.delimiters,
            self.renderer.default_delimiters,
        )

    def execute(self) -> MaterializationResult:
        if self.settings.skip_poms and self.project.packaging == "pom":
            self._debug("Skipping a POM project type. Change `skip_poms` to false to run anyway.")
            return MaterializationResult(MaterializationStatus.SKIPPED)

        source_dir = self.source_directory
        output_dir = self.output_directory
        self._debug(f"source={source_dir} target={output_dir}")

        if source_dir is None or not source_dir.exists():
            console.print(
                f"Request to add '{source_dir}' folder. Not added since it does not exist."
            )
            return MaterializationResult(MaterializationStatus.MISSING)
        if not source_dir.is_dir():
            raise ConfigurationError(f"Source directory {source_dir} is not a directory.")

        staging_dir = self.staging_directory
        if output_dir.is_relative_to(staging_dir):
            # the staging tree is deleted after the sync
            raise ConfigurationError(
                f"Output directory {output_dir} is inside the staging directory {staging_dir}."
            )

        # 1 Render the sources into the staging directory
        request = RenderRequest(
            source_dir=source_dir,
            staging_dir=staging_dir,
            delimiters=self.resolve_delimiters(),
            escape_string=self.settings.escape_string,
            overwrite=self.settings.overwrite,
            encoding=self.settings.encoding,
            excluded_dirs=(output_dir, staging_dir),
        )
        if self.settings.non_filtered_extensions is not None:
            request.non_filtered_extensions = frozenset(self.settings.non_filtered_extensions)
        try:
            self.renderer.render(request)
        except RenderingError as e:
            raise ProcessingError(str(e)) from e

        # 2 Copy what changed, then drop the staging tree
        copied = sync_directories(staging_dir, output_dir, output_dir)
        force_delete(staging_dir)
        if copied > 0:
            console.print(f"Copied `{copied}` to output directory: {output_dir}")
        else:
            console.print("No files have been copied. Up to date.")

        # 3 Add the output directory to the project's sources
        if self.scope is SourceScope.MAIN:
            self.project.add_compile_source_root(output_dir)
        else:
            self.project.add_test_compile_source_root(output_dir)
        console.print(f"Source directory: {output_dir} added.", style="green")

        return MaterializationResult(MaterializationStatus.COMPLETED, copied, output_dir)

    def _debug(self, message: str) -> None:
        if self.verbose:
            console.print(message, style="dim")
